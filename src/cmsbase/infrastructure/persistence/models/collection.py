"""SQLAlchemy model for the collections table.

A collection is one logical table of documents with a user-defined set
of columns.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, false, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from cmsbase.infrastructure.persistence.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class CollectionModel(Base):
    """SQLAlchemy model for the collections table.

    Attributes:
        id: Primary key.
        user_id: Owning user.
        name: Collection name, unique within the namespace.
        type: ``single`` or ``multiple``.
        roles: Free-form access tags.
        column_order: Ordered field ids for presentation.
        is_published: Published flag.
    """

    __tablename__ = "collections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Owning user ID",
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Collection name (1-100 chars, unique per namespace)",
    )
    type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="multiple",
        server_default="multiple",
        comment="single or multiple",
    )
    roles: Mapped[list[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Access tags",
    )
    column_order: Mapped[list[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Ordered field ids for presentation",
    )
    is_published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )
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
        return f"<CollectionModel(id={self.id}, name={self.name})>"
