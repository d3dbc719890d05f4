"""
Password Policy Utilities
Rules a user-chosen password must satisfy when replacing a temporary one.
"""

import re
from typing import List

MIN_LENGTH = 8
MAX_LENGTH = 128


def validate_password(password: str, current_password: str = "") -> List[str]:
    """
    Validate password strength and return a list of errors.
    """
    errors: List[str] = []

    if not password:
        return ["Password is required"]

    if len(password) < MIN_LENGTH:
        errors.append(f"Password must be at least {MIN_LENGTH} characters long")
    if len(password) > MAX_LENGTH:
        errors.append(f"Password must be at most {MAX_LENGTH} characters long")
    if not re.search(r"[A-Za-z]", password):
        errors.append("Password must contain at least one letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one digit")
    if current_password and password == current_password:
        errors.append("New password must differ from the current password")

    return errors
