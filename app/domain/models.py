"""SQLAlchemy ORM models."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, default=_new_id)
    username = Column(String(100), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False, default="")
    role = Column(Enum("user", "admin", name="user_role_enum"), nullable=False, default="user")
    preferences = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class Content(Base):
    __tablename__ = "contents"

    id = Column(String(64), primary_key=True, default=_new_id)
    title = Column(String(500), nullable=False, index=True)
    type = Column(
        Enum("article", "video", "podcast", "image", name="content_type_enum"),
        nullable=False,
        index=True,
    )
    popularity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    tags = relationship(
        "ContentTag",
        back_populates="content",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ContentTag.position",
    )


class ContentTag(Base):
    __tablename__ = "content_tags"

    content_id = Column(
        String(64), ForeignKey("contents.id", ondelete="CASCADE"), primary_key=True
    )
    tag = Column(String(100), primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)

    content = relationship("Content", back_populates="tags")


class Interaction(Base):
    __tablename__ = "interactions"
    __table_args__ = (Index("ix_interactions_user_content", "user_id", "content_id"),)

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    content_id = Column(String(64), ForeignKey("contents.id"), nullable=False, index=True)
    type = Column(
        Enum(
            "view", "like", "share", "comment", "save", "rating",
            name="interaction_type_enum",
        ),
        nullable=False,
    )
    timestamp = Column(DateTime(timezone=True), default=_utcnow, index=True)
    duration = Column(Float, nullable=True)
    comment = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
