"""
JobTrack - SQLAlchemy ORM models

Database models for job applications, their contacts, skill suggestions,
and per-user settings.
"""
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Text, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_name = Column(String, nullable=False)
    company_location = Column(String)
    company_industry = Column(String)
    company_salary_range = Column(String)  # e.g. "USD 90000-120000"
    position = Column(String, nullable=False)
    skills = Column(JSON, default=list)
    application_date = Column(Date)
    cover_letter = Column(Text)
    salary_expectation = Column(String)  # e.g. "EUR 75000"
    job_posting_url = Column(String)
    job_posting_content = Column(Text)
    source = Column(String, default="LinkedIn")
    work_type = Column(String, default="remote")  # remote, hybrid, onsite
    status = Column(String, default="applied", nullable=False)
    notes = Column(Text)
    is_pinned = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    contacts = relationship(
        "ApplicationContact",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="ApplicationContact.id",
    )


class ApplicationContact(Base):
    """A person met during one application (recruiter, interviewer, ...)."""
    __tablename__ = "application_contacts"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String, nullable=False)
    role = Column(String)
    email = Column(String)
    phone = Column(String)
    linkedin = Column(String)
    notes = Column(Text)

    application = relationship("Application", back_populates="contacts")


class SkillSuggestion(Base):
    __tablename__ = "skill_suggestions"

    id = Column(Integer, primary_key=True, index=True)
    label = Column(String, nullable=False, index=True)
    locale = Column(String, nullable=False, default="en")  # en, tr
    popularity = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint("locale", "label", name="uix_skill_locale_label"),
    )


class UserSettings(Base):
    """Per-user preferences: UI language plus custom sources and industries."""
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    language = Column(String, default="en", nullable=False)
    custom_sources = Column(JSON, default=list)
    custom_industries = Column(JSON, default=list)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
