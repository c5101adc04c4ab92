# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/repositories/store_routines.py

Registro de rutinas del almacén de registros.

Cada entrada asocia un nombre lógico con el SQL que invoca la función
correspondiente del schema DB_SCHEMA (search_path lo resuelve). Las
rutinas de escritura devuelven (row_count, return_code):

    0     → éxito
    3     → ninguna fila afectada
    9     → rollback
    1403  → sin datos
    otros → específicos de la rutina

SQL: usa bindparam(expanding=True) para listas de ids (compatibilidad asyncpg).

Autor: ColdVault Team
Fecha: 05/09/2026
"""

from sqlalchemy import bindparam, text

from coldvault.modules.vault.enums import WorkflowKind

# ═══════════════════════════════════════════════════════════════════════════════
# CÓDIGOS DE RETORNO
# ═══════════════════════════════════════════════════════════════════════════════
RC_OK = 0
RC_NO_ROWS = 3
RC_ROLLBACK = 9
RC_NO_DATA = 1403

DOCUMENTS_TABLE = "documents"
FIELDS_TABLE = "document_fields"
CATEGORY_FIELD_NAMES = ("Category", "Photo Category")

# ═══════════════════════════════════════════════════════════════════════════════
# LECTURA (paginada con LIMIT/OFFSET)
# ═══════════════════════════════════════════════════════════════════════════════
CANDIDATE_ROUTINES = {
    WorkflowKind.UPLOAD: "fn_get_docs_to_upload",
    WorkflowKind.PURGE: "fn_get_docs_to_purge",
    WorkflowKind.DELETE: "fn_get_docs_to_del",
    WorkflowKind.RESTORE: "fn_get_docs_to_restore",
}


def candidates_sql(routine: str):
    return text(
        f"SELECT * FROM {routine}() ORDER BY document_id LIMIT :limit OFFSET :offset"
    )


GET_DOCS_PURGED_AWS = text("""
    SELECT document_id, archive_id, metadata, created_on
    FROM fn_get_docs_purged_aws(:inventory_date, :creation_date)
    ORDER BY document_id
    LIMIT :limit OFFSET :offset
""")

GET_RESTORE_JOBS = text(
    "SELECT * FROM fn_get_restore_jobs() ORDER BY document_id LIMIT :limit OFFSET :offset"
)

GET_PURGED_DATE_RANGE = text("SELECT min_date, max_date FROM fn_get_purged_date_range()")
GET_RESTORE_DATE_RANGE = text("SELECT min_date, max_date FROM fn_get_restore_date_range()")
GET_INVENTORY_WORK = text("SELECT fn_get_inv_work() AS pending")
GET_AWS_SETTINGS = text("SELECT fn_get_aws_settings() AS settings")
GET_NAS_PATH = text("SELECT fn_get_nas_path() AS nas_path")

# ═══════════════════════════════════════════════════════════════════════════════
# ESCRITURA (devuelven row_count, return_code)
# ═══════════════════════════════════════════════════════════════════════════════
UPDATE_DOC_STATUS = text("""
    SELECT row_count, return_code
    FROM fn_upd_doc_status(:document_id, :expected_status, :new_status)
""")

INSERT_ARCHIVE = text("""
    SELECT row_count, return_code
    FROM fn_ins_archive(:parid, :document_id, :filename, :file_size, :status, :archive_id, :checksum)
""")

UPDATE_DOC_PURGED = text("SELECT row_count, return_code FROM fn_upd_doc_purged(:document_id)")
DELETE_DOC_RECORDS = text("SELECT row_count, return_code FROM fn_del_docs(:document_id)")
UPDATE_PURGED_JOBID = text("""
    SELECT row_count, return_code
    FROM fn_upd_purged_jobid(:job_id, :start_date, :end_date)
""")
UPDATE_RESTORE_REQUESTED = text(
    "SELECT row_count, return_code FROM fn_upd_docs_restore_requested(:document_id)"
)
UPDATE_RESTORE_DONE = text(
    "SELECT row_count, return_code FROM fn_upd_docs_restore_done(:document_id)"
)

BATCH_UPDATE_STATUS = text(f"""
    UPDATE {DOCUMENTS_TABLE}
    SET status = :new_status, updated_on = now()
    WHERE document_id IN :ids
    AND status = :expected_status
""").bindparams(bindparam("ids", expanding=True))

# Reconciliación de inventario: ambas sentencias en la misma transacción
FLAG_DOCUMENTS_DELETED = text(f"""
    UPDATE {DOCUMENTS_TABLE}
    SET status = 'DELETD', updated_on = now()
    WHERE document_id IN :ids
    AND status = 'PURGED'
""").bindparams(bindparam("ids", expanding=True))

FLAG_FIELDS_DELETED = text(f"""
    UPDATE {FIELDS_TABLE}
    SET string_value = 'DELETD' || REPLACE(string_value, 'PURGED', '')
    WHERE document_id IN :ids
    AND name IN :names
    AND string_value LIKE 'PURGED%'
""").bindparams(bindparam("ids", expanding=True), bindparam("names", expanding=True))


__all__ = [
    "RC_OK",
    "RC_NO_ROWS",
    "RC_ROLLBACK",
    "RC_NO_DATA",
    "CANDIDATE_ROUTINES",
    "CATEGORY_FIELD_NAMES",
    "candidates_sql",
    "GET_DOCS_PURGED_AWS",
    "GET_RESTORE_JOBS",
    "GET_PURGED_DATE_RANGE",
    "GET_RESTORE_DATE_RANGE",
    "GET_INVENTORY_WORK",
    "GET_AWS_SETTINGS",
    "GET_NAS_PATH",
    "UPDATE_DOC_STATUS",
    "INSERT_ARCHIVE",
    "UPDATE_DOC_PURGED",
    "DELETE_DOC_RECORDS",
    "UPDATE_PURGED_JOBID",
    "UPDATE_RESTORE_REQUESTED",
    "UPDATE_RESTORE_DONE",
    "BATCH_UPDATE_STATUS",
    "FLAG_DOCUMENTS_DELETED",
    "FLAG_FIELDS_DELETED",
]
# Fin del archivo coldvault/modules/vault/repositories/store_routines.py
