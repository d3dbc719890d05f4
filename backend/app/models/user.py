import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, ForeignKey, String

from app.core.roles import OnboardingStatus, ReferralStatus, Role
from app.db.base import Base, utcnow


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Account record: credentials, role, and onboarding lifecycle flags."""

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String(150), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # Never serialized; set only through the password hasher
    password_hash = Column(String(255), nullable=True)

    role = Column(
        Enum(Role, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
        default=Role.JOB_SEEKER,
    )
    is_super_admin = Column(Boolean, nullable=False, default=False)

    first_login = Column(Boolean, nullable=False, default=True)
    onboarding_status = Column(
        Enum(OnboardingStatus, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
        default=OnboardingStatus.PENDING,
    )

    created_by = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Referral (sparse: only seekers armed with a code carry one)
    referral_code = Column(String(32), unique=True, nullable=True)
    referral_code_expires_at = Column(DateTime, nullable=True)
    referred_by = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    referral_status = Column(
        Enum(ReferralStatus, values_callable=_enum_values, native_enum=False, length=32),
        nullable=True,
    )
    referred_on = Column(DateTime, nullable=True)

    # Profile, filled in by onboarding
    # {"fullName": str, "phone": str, "skills": [str], "experience": str}
    candidate_details = Column(JSON, nullable=True)
    resume_path = Column(String(1024), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
