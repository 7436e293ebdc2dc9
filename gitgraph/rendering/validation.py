import re
from enum import Enum

from pydantic import BaseModel


DEFAULT_MIN_LENGTH = 1
DEFAULT_MAX_LENGTH = 30

_SUPPORTED_PATTERN = re.compile(r"[A-Z0-9 !?.,:\-+=()]*")


class ValidationReason(str, Enum):
    TYPE = "type"
    LENGTH = "length"
    CHARSET = "charset"


class ValidationResult(BaseModel):
    """Outcome of checking a message before it is rendered."""

    valid: bool
    reason: ValidationReason | None = None
    detail: str | None = None


def validate_message(
    raw: object,
    *,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> ValidationResult:
    """Check a candidate message; the first failing rule is reported.

    Only ASCII is accepted, so upper-casing never changes the length.
    """

    if not isinstance(raw, str):
        return ValidationResult(
            valid=False,
            reason=ValidationReason.TYPE,
            detail="Message must be a string",
        )

    if len(raw) > max_length:
        return ValidationResult(
            valid=False,
            reason=ValidationReason.LENGTH,
            detail=f"Message too long (max {max_length})",
        )

    if len(raw) < min_length:
        return ValidationResult(
            valid=False,
            reason=ValidationReason.LENGTH,
            detail=f"Message too short (min {min_length})",
        )

    if not raw.isascii() or not _SUPPORTED_PATTERN.fullmatch(raw.upper()):
        return ValidationResult(
            valid=False,
            reason=ValidationReason.CHARSET,
            detail="Message contains unsupported characters",
        )

    return ValidationResult(valid=True)
