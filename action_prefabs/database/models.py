"""Document storage models."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class DocumentRecord(Base, TimestampMixin):
    """A stored target document."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    uuid: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        unique=True,
        index=True,
        comment="Opaque document handle (e.g. 'Actor.abc123')",
    )
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    document_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="base",
        comment="Document subtype (e.g. 'character', 'npc')",
    )
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    embedded: Mapped[list["EmbeddedRecord"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="EmbeddedRecord.id",
    )

    def __repr__(self) -> str:
        return f"<DocumentRecord {self.uuid}>"


class EmbeddedRecord(Base, TimestampMixin):
    """An entry of an embedded collection (e.g. an active effect)."""

    __tablename__ = "embedded_entries"
    __table_args__ = (
        UniqueConstraint("document_id", "kind", "entry_id", name="uq_embedded_entry"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    document_id: Mapped[int] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    entry_id: Mapped[str] = mapped_column(String(50), nullable=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    document: Mapped[DocumentRecord] = relationship(back_populates="embedded")

    def __repr__(self) -> str:
        return f"<EmbeddedRecord {self.kind}:{self.entry_id}>"
