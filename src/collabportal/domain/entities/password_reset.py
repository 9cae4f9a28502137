"""Password reset token entity types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResetTokenStatus(str, Enum):
    """Lifecycle of a password reset token.

    ``expired`` is written lazily, the first time a stale token is read.
    """

    PENDING = "pending"
    USED = "used"
    EXPIRED = "expired"


@dataclass(frozen=True)
class ResetValidation:
    """Outcome of a single reset token validation attempt."""

    valid: bool
    message: str
    token: Any = None
