"""SQLAlchemy table metadata for instance labels and resource records."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

from infrasync.domain.model import InstanceState, ResourceKind, ResourceStatus

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

instance_label_table = Table(
    "instance_label",
    metadata,
    Column("instance_id", String(255), primary_key=True),
    Column("model_id", String(255), nullable=False, default=""),
    Column(
        "state",
        Enum(InstanceState, native_enum=False, values_callable=lambda enum: [e.value for e in enum]),
        nullable=False,
    ),
    Column("bindings", JSON, nullable=False, default=dict),
    Column("updated_at", UTCDateTime(), nullable=False),
)

resource_state_table = Table(
    "resource_state",
    metadata,
    Column("instance_id", String(255), primary_key=True),
    Column("resource_id", String(511), primary_key=True),
    Column(
        "kind",
        Enum(ResourceKind, native_enum=False, values_callable=lambda enum: [e.value for e in enum]),
        nullable=False,
    ),
    Column(
        "status",
        Enum(
            ResourceStatus,
            native_enum=False,
            values_callable=lambda enum: [e.value for e in enum],
        ),
        nullable=False,
    ),
    Column("resource_metadata", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)


def create_all_tables(engine: Engine) -> None:
    log.debug("Ensuring infrasync tables exist on %s", engine.url)
    metadata.create_all(engine, checkfirst=True)
