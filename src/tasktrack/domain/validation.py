"""Input rules shared by the registries.

Each check either returns the normalized value or raises
:class:`~tasktrack.domain.errors.ValidationError` with a stable code.
"""

from __future__ import annotations

import math
import re
from numbers import Real
from typing import Any

from tasktrack.domain.errors import ValidationError

_WHITESPACE = re.compile(r"\s")

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def require_text(value: str, message: str, *, code: str) -> str:
    """Return *value* trimmed, or raise if nothing is left."""
    trimmed = value.strip() if isinstance(value, str) else ""
    if not trimmed:
        raise ValidationError(message, code=code)
    return trimmed


def check_credentials(username: str, password: str) -> None:
    """Validate a signup pair.

    The username is stored as given, so it must not contain whitespace
    anywhere; the password only has to be non-blank.
    """
    if not isinstance(username, str) or not isinstance(password, str):
        raise ValidationError("Username and password cannot be empty!", code="EMPTY_CREDENTIALS")
    if not username.strip() or not password.strip():
        raise ValidationError("Username and password cannot be empty!", code="EMPTY_CREDENTIALS")
    if _WHITESPACE.search(username):
        raise ValidationError("Username cannot contain spaces!", code="INVALID_USERNAME")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        msg = f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes!"
        raise ValidationError(msg, code="PASSWORD_TOO_LONG")


def is_negative(priority: Any) -> bool:
    """True for values below zero, including ``-0.0`` and ``-inf``."""
    if isinstance(priority, bool) or not isinstance(priority, Real):
        return False
    if isinstance(priority, float):
        return priority < 0 or (priority == 0 and math.copysign(1.0, priority) < 0)
    return priority < 0


def is_valid_number(priority: Any) -> bool:
    """True for finite real numbers that fit a float; bools are not priorities."""
    if isinstance(priority, bool) or not isinstance(priority, Real):
        return False
    try:
        return math.isfinite(float(priority))
    except OverflowError:
        return False


def check_priority(priority: Any) -> float:
    """Validate a task priority and return it as a float.

    Negativity is checked before finiteness, so ``-inf`` reports as
    negative and ``nan`` / ``inf`` report as not-a-number.
    """
    if is_negative(priority):
        raise ValidationError("Priority cannot be negative!", code="NEGATIVE_PRIORITY")
    if not is_valid_number(priority):
        raise ValidationError("Priority must be a number!", code="INVALID_PRIORITY")
    return float(priority)
