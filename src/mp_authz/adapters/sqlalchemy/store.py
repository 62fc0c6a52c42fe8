"""SQLAlchemy adapter — SQLAlchemyPermissionStore."""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import (
    Column,
    Engine,
    Integer,
    MetaData,
    String,
    Table,
    and_,
    create_engine,
    delete,
    insert,
    select,
)
from sqlalchemy.exc import SQLAlchemyError

from mp_authz.kernel.errors import PermissionStoreError
from mp_authz.kernel.security.permission import Permission, PermissionKind
from mp_authz.kernel.security.principal import NULL_TYPE_ID
from mp_authz.kernel.security.store import PermissionStore

metadata = MetaData()

permissions_table = Table(
    "up_permission",
    metadata,
    # Surrogate key; ascending id is the storage order seen by the engine.
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner", String(255), nullable=False, index=True),
    Column("principal_type", Integer, nullable=False),
    Column("principal_key", String(255), nullable=False),
    Column("activity", String(255), nullable=False),
    Column("target", String(255), nullable=True),
    Column("permission_type", String(8), nullable=False),
)


class SQLAlchemyPermissionStore(PermissionStore):
    """SQLAlchemy 2.x Core-based permission store over a synchronous :class:`Engine`.

    Create the ``up_permission`` table with :meth:`create_table`.  Each
    mutation runs in its own transaction.  Driver errors are raised as
    :class:`PermissionStoreError` carrying the original exception.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: Any) -> "SQLAlchemyPermissionStore":
        return cls(create_engine(url, **engine_kwargs))

    def create_table(self) -> None:
        """Create the ``up_permission`` table if it does not exist."""
        metadata.create_all(self._engine, tables=[permissions_table])

    # ------------------------------------------------------------------
    # PermissionStore interface
    # ------------------------------------------------------------------

    def select(
        self,
        owner: str | None = None,
        principal_type: int | None = None,
        principal_key: str | None = None,
        activity: str | None = None,
        target: str | None = None,
        kind: PermissionKind | None = None,
    ) -> list[Permission]:
        t = permissions_table
        stmt = select(t).order_by(t.c.id)
        if owner is not None:
            stmt = stmt.where(t.c.owner == owner)
        if principal_type is not None and principal_type != NULL_TYPE_ID:
            stmt = stmt.where(t.c.principal_type == principal_type)
        if principal_key is not None:
            stmt = stmt.where(t.c.principal_key == principal_key)
        if activity is not None:
            stmt = stmt.where(t.c.activity == activity)
        if target is not None:
            stmt = stmt.where(t.c.target == target)
        if kind is not None:
            stmt = stmt.where(t.c.permission_type == PermissionKind(kind).value)

        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).fetchall()
        except SQLAlchemyError as exc:
            raise PermissionStoreError("select", cause=exc) from exc
        return [
            Permission(
                owner=row.owner,
                principal_type=row.principal_type,
                principal_key=row.principal_key,
                activity=row.activity,
                target=row.target,
                kind=PermissionKind(row.permission_type),
            )
            for row in rows
        ]

    def add(self, permissions: Sequence[Permission]) -> None:
        for p in permissions:
            p.validate()
        self._execute("add", [insert(permissions_table).values(**_row(p)) for p in permissions])

    def update(self, permissions: Sequence[Permission]) -> None:
        for p in permissions:
            p.validate()
        t = permissions_table
        statements = []
        for p in permissions:
            statements.append(
                t.update()
                .where(_identity_clause(p))
                .values(permission_type=p.kind.value)
            )
        self._execute("update", statements)

    def delete(self, permissions: Sequence[Permission]) -> None:
        t = permissions_table
        self._execute("delete", [delete(t).where(_identity_clause(p)) for p in permissions])

    def _execute(self, operation: str, statements: list[Any]) -> None:
        try:
            with self._engine.begin() as conn:
                for stmt in statements:
                    conn.execute(stmt)
        except SQLAlchemyError as exc:
            raise PermissionStoreError(operation, cause=exc) from exc


def _row(p: Permission) -> dict[str, Any]:
    return {
        "owner": p.owner,
        "principal_type": p.principal_type,
        "principal_key": p.principal_key,
        "activity": p.activity,
        "target": p.target,
        "permission_type": p.kind.value,
    }


def _identity_clause(p: Permission) -> Any:
    t = permissions_table
    target_clause = t.c.target.is_(None) if p.target is None else t.c.target == p.target
    return and_(
        t.c.owner == p.owner,
        t.c.principal_type == p.principal_type,
        t.c.principal_key == p.principal_key,
        t.c.activity == p.activity,
        target_clause,
    )


__all__ = ["SQLAlchemyPermissionStore", "permissions_table"]
