# -*- coding: utf-8 -*-
"""
coldvault/main.py

CLI de ColdVault.

    coldvault run <upload|purge|inventory|delete|restore>
        Ejecuta un run, imprime la línea final de estado en stdout
        ("0" si no hubo nada que hacer) y sale con código 1.

    coldvault serve
        Registra los workflows en el scheduler y queda en ejecución
        hasta recibir SIGINT/SIGTERM.

Los logs de aplicación van a stderr; stdout queda reservado a la línea
de estado que lee el servicio.

Autor: ColdVault Team
Fecha: 13/09/2026
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional, Sequence

from coldvault.modules.vault.enums import WorkflowKind
from coldvault.modules.vault.jobs import RUN_COMPLETED_EXIT_CODE, execute_workflow, register_vault_jobs
from coldvault.shared.config import BaseAppSettings, get_settings, setup_logging
from coldvault.shared.scheduler import get_scheduler

logger = logging.getLogger("coldvault.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coldvault",
        description="Ciclo de vida de documentos entre el NAS y la bóveda Glacier",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Ejecuta un run de un workflow y termina")
    run.add_argument("kind", choices=[kind.value for kind in WorkflowKind], help="Workflow a ejecutar")

    commands.add_parser("serve", help="Inicia el scheduler de workflows")
    return parser


def run_once(kind: str, settings: BaseAppSettings) -> int:
    ctx = asyncio.run(execute_workflow(kind, settings=settings))
    print(ctx.summary_line(), flush=True)
    return RUN_COMPLETED_EXIT_CODE


async def serve(settings: BaseAppSettings) -> None:
    """Servicio de larga duración: scheduler + espera de señal de parada."""
    scheduler = get_scheduler(settings.scheduler_timezone)
    register_vault_jobs(scheduler, settings)
    scheduler.start()
    logger.info("coldvault_service_started: app=%s env=%s", settings.app_name, settings.python_env)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            logger.debug("signal_handler_unsupported: signal=%s", sig)

    try:
        await stop.wait()
    finally:
        scheduler.shutdown(wait=False)
        logger.info("coldvault_service_stopped")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    if args.command == "run":
        return run_once(args.kind, settings)

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("coldvault_service_interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())

# Fin del archivo coldvault/main.py
