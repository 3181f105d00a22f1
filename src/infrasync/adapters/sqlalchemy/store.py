"""Resource store backed by a SQL database through SQLAlchemy.

Each operation runs in its own short transaction. Concurrent writers are
serialised by the database; there is still no multi-resource atomicity across
one reconciliation run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from infrasync.domain.errors import InstanceNotFoundError, StoreLoadError, StoreWriteError
from infrasync.domain.model import InstanceLabel, ResourceState

from .mappings import create_all_tables, instance_label_table, resource_state_table

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.engine import Engine

    from infrasync.config.storage import StorageConfig


def build_engine(database_uri: str) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""

    if database_uri.endswith(":memory:"):
        return create_engine(
            database_uri,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_uri)


class SqlAlchemyResourceStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        create_all_tables(engine)
        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=engine, expire_on_commit=False
        )

    @classmethod
    def from_uri(cls, database_uri: str) -> SqlAlchemyResourceStore:
        return cls(build_engine(database_uri))

    @classmethod
    def from_config(cls, config: StorageConfig) -> SqlAlchemyResourceStore:
        return cls.from_uri(config.database_uri())

    def dispose(self) -> None:
        self.engine.dispose()

    # Status store ---------------------------------------------------------------

    def get_status(self, instance_id: str) -> InstanceLabel:
        stmt = select(instance_label_table).where(
            instance_label_table.c.instance_id == instance_id
        )
        try:
            with self._session_factory() as session:
                row = session.execute(stmt).one_or_none()
        except SQLAlchemyError as exc:
            raise StoreLoadError(f"Failed to load label for [{instance_id}]: {exc}") from exc
        if row is None:
            raise InstanceNotFoundError(instance_id)
        return InstanceLabel(
            instance_id=row.instance_id,
            model_id=row.model_id,
            state=row.state,
            bindings=row.bindings or {},
            updated_at=row.updated_at,
        )

    def save_status(self, instance_id: str, label: InstanceLabel) -> None:
        values: dict[str, Any] = {
            "model_id": label.model_id,
            "state": label.state,
            "bindings": dict(label.bindings),
            "updated_at": label.updated_at,
        }
        table = instance_label_table
        try:
            with self._session_factory.begin() as session:
                exists = session.execute(
                    select(table.c.instance_id).where(table.c.instance_id == instance_id)
                ).first()
                if exists is None:
                    session.execute(insert(table).values(instance_id=instance_id, **values))
                else:
                    session.execute(
                        update(table).where(table.c.instance_id == instance_id).values(**values)
                    )
        except SQLAlchemyError as exc:
            raise StoreWriteError(f"Failed to save label for [{instance_id}]: {exc}") from exc

    def list_instances(self) -> list[str]:
        stmt = select(instance_label_table.c.instance_id).order_by(
            instance_label_table.c.instance_id
        )
        try:
            with self._session_factory() as session:
                return list(session.execute(stmt).scalars())
        except SQLAlchemyError as exc:
            raise StoreLoadError(f"Failed to list instances: {exc}") from exc

    # Resource store -------------------------------------------------------------

    def get_resources(self, instance_id: str) -> dict[str, ResourceState]:
        stmt = select(resource_state_table).where(
            resource_state_table.c.instance_id == instance_id
        )
        try:
            with self._session_factory() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreLoadError(f"Failed to load resources for [{instance_id}]: {exc}") from exc
        return {row.resource_id: _resource_from_row(row) for row in rows}

    def save_resource(self, instance_id: str, resource: ResourceState) -> None:
        table = resource_state_table
        key = (table.c.instance_id == instance_id) & (table.c.resource_id == resource.id)
        try:
            with self._session_factory.begin() as session:
                row = session.execute(select(table).where(key)).one_or_none()
                stored = resource.upserted_over(_resource_from_row(row) if row else None)
                values: dict[str, Any] = {
                    "kind": stored.kind,
                    "status": stored.status,
                    "resource_metadata": dict(stored.metadata),
                    "created_at": stored.created_at,
                    "updated_at": stored.updated_at,
                }
                if row is None:
                    session.execute(
                        insert(table).values(
                            instance_id=instance_id, resource_id=stored.id, **values
                        )
                    )
                else:
                    session.execute(update(table).where(key).values(**values))
        except SQLAlchemyError as exc:
            raise StoreWriteError(f"Failed to save resource [{resource.id}]: {exc}") from exc

    def delete_resource(self, instance_id: str, resource_id: str) -> None:
        table = resource_state_table
        stmt = delete(table).where(
            (table.c.instance_id == instance_id) & (table.c.resource_id == resource_id)
        )
        try:
            with self._session_factory.begin() as session:
                session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreWriteError(f"Failed to delete resource [{resource_id}]: {exc}") from exc


def _resource_from_row(row: Row[Any]) -> ResourceState:
    return ResourceState(
        id=row.resource_id,
        kind=row.kind,
        status=row.status,
        metadata=row.resource_metadata or {},
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


if TYPE_CHECKING:
    from infrasync.domain.ports import ResourceStore

    _store_check: ResourceStore = SqlAlchemyResourceStore(build_engine("sqlite://"))
