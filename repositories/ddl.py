"""Schema files shipped with the ``repositories`` package."""

from __future__ import annotations

import re
from importlib import resources
from importlib.resources.abc import Traversable

_STATEMENT_END = re.compile(r";[ \t]*$", re.MULTILINE)


class DDLNotFoundError(FileNotFoundError):
    """Raised when a requested DDL file cannot be located."""


def ddl_root() -> Traversable:
    """Return the packaged ``ddls`` directory."""

    return resources.files("repositories") / "ddls"


def load_ddl(name: str, *, directory: Traversable | None = None) -> str:
    """Return the text of ``name`` (``.ddl`` suffix optional) from ``directory``."""

    filename = name if name.lower().endswith(".ddl") else f"{name}.ddl"
    resource = (directory or ddl_root()) / filename
    if not resource.is_file():
        raise DDLNotFoundError(f"DDL file not found: {filename}")
    return resource.read_text(encoding="utf-8")


def parse_statements(ddl_text: str) -> list[str]:
    """Split ``ddl_text`` on line-terminating semicolons.

    Blank lines and ``--`` comment lines are dropped before splitting. Each
    statement keeps its semicolon; an unterminated tail is returned as is.
    """

    body = "\n".join(
        line
        for line in ddl_text.splitlines()
        if line.strip() and not line.lstrip().startswith("--")
    )

    statements: list[str] = []
    position = 0
    for match in _STATEMENT_END.finditer(body):
        statements.append(body[position : match.start()].strip() + ";")
        position = match.end()

    tail = body[position:].strip()
    if tail:
        statements.append(tail)
    return statements


def load_statements(name: str, *, directory: Traversable | None = None) -> list[str]:
    return parse_statements(load_ddl(name, directory=directory))


__all__ = [
    "DDLNotFoundError",
    "ddl_root",
    "load_ddl",
    "load_statements",
    "parse_statements",
]
