"""SQLAlchemy models for accounts, cards (profiles) and analytics events."""
from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship("Profile", uselist=False, back_populates="user", cascade="all,delete-orphan")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    username = Column(String(64), unique=True, nullable=False)

    first_name = Column(String(120), default="", nullable=False)
    last_name = Column(String(120), default="", nullable=False)
    title = Column(String(160), default="", nullable=False)
    company = Column(String(160), default="", nullable=False)
    bio = Column(Text, default="", nullable=False)
    avatar_url = Column(Text, default="", nullable=False)

    phone = Column(String(64), default="", nullable=False)
    phone_enabled = Column(Boolean, default=False, nullable=False)
    email_contact = Column(String(255), default="", nullable=False)
    email_enabled = Column(Boolean, default=False, nullable=False)
    website = Column(Text, default="", nullable=False)
    website_enabled = Column(Boolean, default=False, nullable=False)
    linkedin = Column(Text, default="", nullable=False)
    linkedin_enabled = Column(Boolean, default=False, nullable=False)
    twitter = Column(Text, default="", nullable=False)
    twitter_enabled = Column(Boolean, default=False, nullable=False)
    instagram = Column(Text, default="", nullable=False)
    instagram_enabled = Column(Boolean, default=False, nullable=False)
    facebook = Column(Text, default="", nullable=False)
    facebook_enabled = Column(Boolean, default=False, nullable=False)
    tiktok = Column(Text, default="", nullable=False)
    tiktok_enabled = Column(Boolean, default=False, nullable=False)
    youtube = Column(Text, default="", nullable=False)
    youtube_enabled = Column(Boolean, default=False, nullable=False)
    snapchat = Column(Text, default="", nullable=False)
    snapchat_enabled = Column(Boolean, default=False, nullable=False)
    github = Column(Text, default="", nullable=False)
    github_enabled = Column(Boolean, default=False, nullable=False)
    whatsapp = Column(String(64), default="", nullable=False)
    whatsapp_enabled = Column(Boolean, default=False, nullable=False)
    telegram = Column(String(120), default="", nullable=False)
    telegram_enabled = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="profile")


class UserSession(Base):
    __tablename__ = "sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class AnalyticsEvent(Base):
    __tablename__ = "analytics_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(String(32), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
