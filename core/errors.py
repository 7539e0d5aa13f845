"""
Domain error taxonomy for settlement, ledger and payout operations.

Every failure surfaced to a caller carries one stable ``kind`` (the taxonomy
bucket), a machine ``code`` and a human message. Optional context
(``field``, ``current_state``) tells the caller what to correct.

    NotFound               404   vendor / payout / order absent
    Forbidden              403   actor lacks rights over the resource
    InvalidTransition      409   payout or vendor-order state machine violation
    BusinessRuleViolation  400   minimum, balance, commission bounds, empty order
    Conflict               409   duplicate vendor order, idempotency key reuse

None of these are retried; they are terminal answers to the request.
"""

from __future__ import annotations

from typing import Any

from rest_framework import status
from rest_framework.exceptions import APIException


class DomainError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request could not be processed."
    default_code = "domain_error"
    kind = "DomainError"

    def __init__(
        self,
        detail: str | None = None,
        *,
        code: str | None = None,
        field: str | None = None,
        current_state: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, code=code)
        self.message = str(detail or self.default_detail)
        self.code = code or self.default_code
        self.field = field
        self.current_state = current_state
        self.extra = extra or {}

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "detail": self.message,
            "kind": self.kind,
            "code": self.code,
        }
        if self.field:
            data["field"] = self.field
        if self.current_state:
            data["current_state"] = self.current_state
        if self.extra:
            data.update(self.extra)
        return data

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------
# Taxonomy roots
# ---------------------------------------------------------------------
class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"
    kind = "NotFound"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"
    kind = "Forbidden"


class InvalidTransition(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The resource is not in a state that allows this action."
    default_code = "invalid_transition"
    kind = "InvalidTransition"


class BusinessRuleViolation(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request violates a business rule."
    default_code = "business_rule_violation"
    kind = "BusinessRuleViolation"


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with an existing resource."
    default_code = "conflict"
    kind = "Conflict"


# ---------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------
class VendorNotFound(NotFound):
    default_detail = "Vendor does not exist."
    default_code = "vendor_not_found"


class UnknownVendor(NotFound):
    default_detail = "An order item references a vendor that does not exist."
    default_code = "unknown_vendor"


class PayoutNotFound(NotFound):
    default_detail = "Payout does not exist."
    default_code = "payout_not_found"


class OrderNotFound(NotFound):
    default_detail = "Order does not exist."
    default_code = "order_not_found"


class VendorOrderNotFound(NotFound):
    default_detail = "Vendor order does not exist."
    default_code = "vendor_order_not_found"


# ---------------------------------------------------------------------
# Forbidden
# ---------------------------------------------------------------------
class Unauthorized(Forbidden):
    default_detail = "You are not authorized to act for this vendor."
    default_code = "unauthorized"


# ---------------------------------------------------------------------
# Business rules
# ---------------------------------------------------------------------
class InvalidCommission(BusinessRuleViolation):
    default_detail = "Commission percentage is out of bounds."
    default_code = "invalid_commission"


class BelowMinimum(BusinessRuleViolation):
    default_detail = "Payout amount is below the minimum."
    default_code = "below_minimum"


class InsufficientBalance(BusinessRuleViolation):
    default_detail = "Insufficient vendor balance."
    default_code = "insufficient_balance"


class EmptyOrder(BusinessRuleViolation):
    default_detail = "Order has no items to split."
    default_code = "empty_order"


class InvalidAmount(BusinessRuleViolation):
    default_detail = "Amount must not be negative."
    default_code = "invalid_amount"


class VendorInUse(BusinessRuleViolation):
    default_detail = "Vendor still owns orders or payouts."
    default_code = "vendor_in_use"


# ---------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------
class DuplicateVendorOrder(Conflict):
    default_detail = "A vendor order already exists for this order and vendor."
    default_code = "duplicate_vendor_order"
