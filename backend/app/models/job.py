from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.roles import ApplicationStatus
from app.db.base import Base, utcnow
from app.models.user import _enum_values, new_id


class Job(Base):
    """A job listing; ``posted_by`` is the owner for authorization checks."""

    __tablename__ = "jobs"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    posted_by = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")


class Application(Base):
    """A job seeker's application to a job."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),)

    id = Column(String(32), primary_key=True, default=new_id)
    job_id = Column(String(32), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(ApplicationStatus, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    job = relationship("Job", back_populates="applications")
