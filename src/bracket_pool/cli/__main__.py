"""Entry point for ``python -m bracket_pool.cli``."""

from __future__ import annotations

from bracket_pool.cli.main import app

app()
