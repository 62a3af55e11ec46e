"""Base model shared by the record types exposed over HTTP."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def to_camel(value: str) -> str:
    """Convert ``snake_case`` ``value`` into ``camelCase`` for JSON aliases."""

    components = value.split("_")
    if not components:
        return value
    first, *rest = components
    return first + "".join(token.capitalize() for token in rest)


class CamelModel(BaseModel):
    """Base model applying camelCase aliases and ignoring unknown fields."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class RecordModel(CamelModel):
    """Persisted record identified by a server-assigned integer ``id``."""

    id: int | None = None

    @property
    def is_persisted(self) -> bool:
        """Return ``True`` once the repository has assigned an identifier."""

        return self.id is not None and self.id > 0


__all__ = ["CamelModel", "RecordModel", "to_camel"]
