from app.services.authorization import authorize, check_ownership
from app.services.email import OutgoingEmail, SmtpMailer, send_best_effort
from app.services.resume_store import LocalResumeStore

__all__ = [
    "authorize",
    "check_ownership",
    "OutgoingEmail",
    "SmtpMailer",
    "send_best_effort",
    "LocalResumeStore",
]
