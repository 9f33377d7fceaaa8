"""Human-readable identifiers for employees and forms."""

from __future__ import annotations

import logging
import secrets
import string
import time
import uuid
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

_BASE36_DIGITS = string.digits + string.ascii_uppercase

IsTaken = Callable[[str], Awaitable[bool]]


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 conversion requires a non-negative integer")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def role_abbreviation(role: str) -> str:
    """Initials of each hyphen-separated word: "assistant-manager" -> "AM"."""
    return "".join(word[0] for word in role.split("-") if word).upper()


def department_abbreviation(department: str) -> str:
    return department[:3].upper()


def employee_id_candidate(role: str, department: str) -> str:
    suffix = uuid.uuid4().hex[:8].upper()
    return f"{role_abbreviation(role)}-{department_abbreviation(department)}-{suffix}"


def form_id_candidate(prefix: str = "FORM", now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    random_part = "".join(secrets.choice(_BASE36_DIGITS) for _ in range(4))
    timestamp_part = to_base36(now_ms)[-4:]
    return f"{prefix}-{random_part}{timestamp_part}"


async def _first_free(make_candidate: Callable[[], str], is_taken: IsTaken) -> str:
    # No retry limit: collisions on these key spaces are vanishingly rare.
    while True:
        candidate = make_candidate()
        if not await is_taken(candidate):
            return candidate
        logger.warning("Generated identifier %s already exists, regenerating", candidate)


async def generate_employee_id(role: str, department: str, is_taken: IsTaken) -> str:
    return await _first_free(lambda: employee_id_candidate(role, department), is_taken)


async def generate_form_id(is_taken: IsTaken, prefix: str = "FORM") -> str:
    return await _first_free(lambda: form_id_candidate(prefix), is_taken)
