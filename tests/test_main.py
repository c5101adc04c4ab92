# -*- coding: utf-8 -*-
"""
Tests de la línea de comandos.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from coldvault.main import build_parser, run_once


def test_parser_accepts_workflow_kinds():
    args = build_parser().parse_args(["run", "inventory"])
    assert (args.command, args.kind) == ("run", "inventory")
    assert build_parser().parse_args(["serve"]).command == "serve"


def test_parser_rejects_unknown_kind():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "compress"])


def test_run_once_prints_status_line(vault_settings, capsys):
    ctx = MagicMock()
    ctx.summary_line.return_value = "0"

    with patch("coldvault.main.execute_workflow", AsyncMock(return_value=ctx)):
        assert run_once("upload", vault_settings) == 1

    assert capsys.readouterr().out == "0\n"
