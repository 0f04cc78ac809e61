"""Payment record state machine with transition validation."""

from __future__ import annotations

from enum import Enum
from typing import Any

from worksync.errors import InvalidTransitionError, ValidationError


class PaymentStatus(str, Enum):
    """Payment record status values."""

    PENDING = "pending"
    PAID = "paid"

    @classmethod
    def parse(cls, value: Any) -> PaymentStatus:
        """Parse a status literal, raising ValidationError for anything else.

        Only the two canonical literals are accepted; ``approved`` from
        older clients is rejected rather than aliased.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError(
                f"Invalid payment status {value!r}; expected one of: {allowed}"
            ) from None


class PaymentStateMachine:
    """State machine for payment record status transitions.

    Allowed transitions:
    - pending → paid

    Re-applying the current status is a no-op. ``paid`` is terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PaymentStatus.PENDING: [PaymentStatus.PAID],
        PaymentStatus.PAID: [],  # Terminal state
    }

    INITIAL_STATUS = PaymentStatus.PENDING

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def is_noop(cls, from_status: str, to_status: str) -> bool:
        return from_status == to_status

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if cls.is_noop(from_status, to_status):
            return
        if not cls.can_transition(from_status, to_status):
            reason = "paid is terminal" if from_status == PaymentStatus.PAID else None
            raise InvalidTransitionError(_literal(from_status), _literal(to_status), reason)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def is_settled(cls, status: str) -> bool:
        """Check if money has actually been paid out for this status."""
        return status == PaymentStatus.PAID


def _literal(status: str) -> str:
    return status.value if isinstance(status, PaymentStatus) else status
