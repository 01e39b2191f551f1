from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console()

_LEVEL_TAGS = {
    "info": "[bold cyan]•[/]",
    "ok": "[bold green]OK[/]",
    "warn": "[bold yellow]WARN[/]",
    "err": "[bold red]ERR[/]",
}


def emit(level: str, msg: str) -> None:
    console.print(f"{_LEVEL_TAGS[level]} {escape(msg)}")


def info(msg: str) -> None:
    emit("info", msg)


def ok(msg: str) -> None:
    emit("ok", msg)


def warn(msg: str) -> None:
    emit("warn", msg)


def err(msg: str) -> None:
    emit("err", msg)


def print_json(data) -> None:
    console.print_json(data=data)
