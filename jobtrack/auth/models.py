"""Accounts, and the Google/GitHub identities linked to them."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from ..database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    # NULL for accounts that only ever signed in through a provider
    password_hash = Column(String)
    is_active = Column(Boolean, default=True, nullable=False)
    # Bumped on sign-out and password change; tokens carrying an older value are void
    session_epoch = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    identities = relationship("LinkedIdentity", back_populates="user", cascade="all, delete-orphan")
    applications = relationship("Application", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None


class LinkedIdentity(Base):
    """A provider account (provider + its stable user id) that signs in as a JobTrack user."""
    __tablename__ = "linked_identities"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    linked_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="identities")

    __table_args__ = (
        UniqueConstraint("provider", "subject", name="uq_identity_provider_subject"),
    )
