"""PostgreSQL repositories backed by an async psycopg connection pool."""

from __future__ import annotations

from typing import Any, Generic, Mapping, Sequence, TypeVar

import psycopg
from psycopg import errors, sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from repositories.ddl import load_statements
from shared.config.settings import DatabaseSettings
from shared.http.errors import NotFoundError
from shared.models import Encounter, Patient, RecordModel
from shared.observability.logger import get_logger

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=RecordModel)

_TABLES = ("patients", "encounters")


class StorageError(RuntimeError):
    """Base error for storage layer operations."""


class ConstraintViolationError(StorageError):
    """Raised when a database constraint is violated."""

    def __init__(
        self,
        message: str,
        *,
        constraint: str | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.constraint = constraint
        self.detail = detail


class PostgresDatabase:
    """Owns the connection pool and schema management for the records tables."""

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 10,
        timeout: float | None = None,
    ) -> None:
        pool_kwargs: dict[str, Any] = {"min_size": min_size, "max_size": max_size}
        if timeout is not None:
            pool_kwargs["timeout"] = timeout

        self._pool = AsyncConnectionPool(
            dsn,
            open=False,
            kwargs={"row_factory": dict_row},
            **pool_kwargs,
        )

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "PostgresDatabase":
        return cls(
            settings.dsn,
            min_size=settings.min_size,
            max_size=settings.max_size,
            timeout=settings.timeout,
        )

    async def open(self) -> None:
        await self._pool.open()

    async def close(self) -> None:
        await self._pool.close()

    async def bootstrap_schema(self, ddl_names: Sequence[str] = ("records",)) -> None:
        """Execute the bundled DDL files to create the records tables."""

        statements: list[str] = []
        for name in ddl_names:
            statements.extend(load_statements(name))
        for statement in statements:
            await self.fetch(statement)
        logger.info("schema_bootstrapped", statements=len(statements))

    async def reset(self) -> None:
        """Remove every stored record and restart id sequences."""

        query = sql.SQL("TRUNCATE {tables} RESTART IDENTITY").format(
            tables=sql.SQL(", ").join(sql.Identifier(name) for name in _TABLES)
        )
        await self.fetch(query)
        logger.info("tables_reset", tables=list(_TABLES))

    async def fetch(
        self,
        query: str | sql.Composable,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Run ``query`` in its own transaction and return any result rows."""

        try:
            async with self._pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    rows = await cur.fetchall() if cur.description else []
                await conn.commit()
        except errors.IntegrityError as exc:
            diag = getattr(exc, "diag", None)
            detail = getattr(diag, "message_detail", None)
            raise ConstraintViolationError(
                detail or "Database constraint violated.",
                constraint=getattr(diag, "constraint_name", None),
                detail=detail,
            ) from exc
        except psycopg.Error as exc:
            raise StorageError(str(exc) or type(exc).__name__) from exc
        return list(rows)


class _PostgresRepository(Generic[RecordT]):
    """Row-per-record table access shared by the concrete repositories."""

    table: str
    model: type[RecordT]
    resource: str

    def __init__(self, database: PostgresDatabase) -> None:
        self._database = database
        self._columns = [name for name in self.model.model_fields if name != "id"]

    def _to_record(self, row: Mapping[str, Any]) -> RecordT:
        return self.model.model_validate(dict(row))

    def _params(self, record: RecordT) -> dict[str, Any]:
        return record.model_dump(include=set(self._columns))

    async def _select(
        self, where: sql.Composable | None = None, params: Mapping[str, Any] | None = None
    ) -> list[RecordT]:
        query = sql.SQL("SELECT * FROM {table}").format(table=sql.Identifier(self.table))
        if where is not None:
            query = query + sql.SQL(" WHERE ") + where
        query = query + sql.SQL(" ORDER BY id")
        rows = await self._database.fetch(query, params)
        return [self._to_record(row) for row in rows]

    async def list_all(self) -> list[RecordT]:
        return await self._select()

    async def get_by_id(self, record_id: int) -> RecordT | None:
        records = await self._select(sql.SQL("id = %(id)s"), {"id": record_id})
        return records[0] if records else None

    async def create(self, record: RecordT) -> RecordT:
        query = sql.SQL(
            "INSERT INTO {table} ({columns}) VALUES ({values}) RETURNING *"
        ).format(
            table=sql.Identifier(self.table),
            columns=sql.SQL(", ").join(sql.Identifier(name) for name in self._columns),
            values=sql.SQL(", ").join(sql.Placeholder(name) for name in self._columns),
        )
        rows = await self._database.fetch(query, self._params(record))
        if not rows:
            raise StorageError(f"Insert into {self.table} did not return a row.")
        return self._to_record(rows[0])

    async def update(self, record: RecordT) -> RecordT:
        query = sql.SQL("UPDATE {table} SET {assignments} WHERE id = %(id)s RETURNING *").format(
            table=sql.Identifier(self.table),
            assignments=sql.SQL(", ").join(
                sql.SQL("{} = {}").format(sql.Identifier(name), sql.Placeholder(name))
                for name in self._columns
            ),
        )
        rows = await self._database.fetch(query, {**self._params(record), "id": record.id})
        if not rows:
            raise NotFoundError(self.resource, record.id or 0)
        return self._to_record(rows[0])


class PostgresPatientRepository(_PostgresRepository[Patient]):
    """Patient repository reading and writing the ``patients`` table."""

    table = "patients"
    model = Patient
    resource = "Patient"

    async def get_by_email(self, email: str) -> Patient | None:
        records = await self._select(sql.SQL("email = %(email)s"), {"email": email})
        return records[0] if records else None

    async def delete(self, patient: Patient) -> None:
        query = sql.SQL("DELETE FROM {table} WHERE id = %(id)s RETURNING id").format(
            table=sql.Identifier(self.table)
        )
        rows = await self._database.fetch(query, {"id": patient.id})
        if not rows:
            raise NotFoundError(self.resource, patient.id or 0)


class PostgresEncounterRepository(_PostgresRepository[Encounter]):
    """Encounter repository reading and writing the ``encounters`` table."""

    table = "encounters"
    model = Encounter
    resource = "Encounter"


__all__ = [
    "ConstraintViolationError",
    "PostgresDatabase",
    "PostgresEncounterRepository",
    "PostgresPatientRepository",
    "StorageError",
]
