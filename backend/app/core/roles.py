"""Closed enumerations for account role and lifecycle state."""

import enum


class Role(str, enum.Enum):
    ADMIN = "admin"
    JOB_POSTER = "job_poster"
    JOB_SEEKER = "job_seeker"
    JOB_REFERRER = "job_referrer"


class OnboardingStatus(str, enum.Enum):
    # NOT_STARTED and IN_PROGRESS are declared but never assigned.
    NOT_STARTED = "not_started"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ReferralStatus(str, enum.Enum):
    PENDING_ONBOARDING = "Pending Onboarding"
    ONBOARDING_COMPLETE = "Onboarding Complete"


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
