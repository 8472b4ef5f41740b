from __future__ import annotations

from fastapi import status


class GymDeskError(Exception):
    """Base class for business-rule failures raised by the services."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "gymdesk_error"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(GymDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class MembershipNotFound(NotFound):
    code = "membership_not_found"
    default_message = "Membership not found"


class DuplicateActiveMembership(GymDeskError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_active_membership"
    default_message = "Member already has an active or pending membership"


class InvalidMembershipState(GymDeskError):
    code = "invalid_membership_state"
    default_message = "Membership is not in a state that accepts payments"


class PaymentExceedsBalance(GymDeskError):
    code = "payment_exceeds_balance"
    default_message = "Payment exceeds membership price"


class InvalidAmount(GymDeskError):
    code = "invalid_amount"
    default_message = "Amount must be a non-negative value with at most two decimals"


class InvalidStatusTransition(GymDeskError):
    code = "invalid_status_transition"
    default_message = "Membership status change is not allowed"


class InvalidMembershipDates(GymDeskError):
    code = "invalid_membership_dates"
    default_message = "Membership end date cannot be before its start date"


class InvalidPlan(GymDeskError):
    code = "invalid_plan"
    default_message = "Plan is not active"
