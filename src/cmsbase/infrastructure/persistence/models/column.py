"""SQLAlchemy model for the collection_columns table.

Each row is one typed field of a collection. ``field_id`` is the key
used for the field in document payloads.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column

from cmsbase.infrastructure.persistence.database import Base
from cmsbase.infrastructure.persistence.models.collection import JSONType


class CollectionColumnModel(Base):
    """SQLAlchemy model for the collection_columns table.

    Attributes:
        id: Primary key.
        collection_id: Owning collection.
        column_name: Display label.
        field_id: Stable identifier, unique within the collection.
        type: Field type key.
        field_options: Type-specific configuration.
        validation: Type-specific validation rules.
        index: Optional ``{direction, nulls}`` index spec.
    """

    __tablename__ = "collection_columns"
    __table_args__ = (
        UniqueConstraint("collection_id", "field_id", name="uq_collection_columns_collection_field"),
        Index("ix_collection_columns_collection_field", "collection_id", "field_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collections.id"),
        nullable=False,
    )
    column_name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_id: Mapped[str] = mapped_column(
        String(15),
        nullable=False,
        comment="JSON key of this field in document payloads",
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    help: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    enable_delete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    enable_sort: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    enable_hide: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    enable_filter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    sort_by: Mapped[str] = mapped_column(String(4), nullable=False, default="asc", server_default="asc")
    visibility: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    index: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    field_options: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    validation: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_by: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<CollectionColumnModel(collection_id={self.collection_id}, field_id={self.field_id})>"
