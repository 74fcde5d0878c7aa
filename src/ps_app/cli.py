# src/ps_app/cli.py
from __future__ import annotations

import typer

from ps_app.commands.sort import register as register_sort

app = typer.Typer(help="Photo Sort CLI")

register_sort(app)


if __name__ == "__main__":
    app()
