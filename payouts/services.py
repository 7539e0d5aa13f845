"""
Payout request state machine.

    PENDING --approve--> COMPLETED   (ledger debited in the same transaction)
    PENDING --reject---> REJECTED
    PENDING --cancel---> deleted     (requester only)

Every transition locks the payout row and then writes with a conditional
``UPDATE ... WHERE status = 'PENDING'``; whichever transaction commits first
wins and the loser fails with InvalidTransition or PayoutNotFound.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count, Q, Sum
from django.utils import timezone

from core.errors import (
    BelowMinimum,
    Conflict,
    Forbidden,
    InsufficientBalance,
    InvalidAmount,
    InvalidTransition,
    PayoutNotFound,
)
from core.models import log_action
from ledger import services as ledger
from orders.money import D, ZERO, q2
from users.utils import is_platform_admin
from vendor_app.services import get_vendor, require_min_role

from .enums import PayoutStatus
from .models import VendorPayout

logger = logging.getLogger(__name__)

DEFAULT_MIN_PAYOUT = Decimal("10.00")


def min_payout_amount() -> Decimal:
    return q2(getattr(settings, "PAYOUT_MIN_AMOUNT", DEFAULT_MIN_PAYOUT))


def _require_admin(actor, action: str) -> None:
    if not is_platform_admin(actor):
        raise Forbidden(f"Only platform administrators may {action} payouts.")


def _lock_payout(payout_id) -> VendorPayout:
    try:
        return VendorPayout.objects.select_for_update().get(pk=payout_id)
    except (VendorPayout.DoesNotExist, ValueError, TypeError):
        raise PayoutNotFound(f"Payout {payout_id} does not exist.")


def _require_pending(payout: VendorPayout, action: str) -> None:
    if payout.status != PayoutStatus.PENDING:
        raise InvalidTransition(
            f"Cannot {action} a payout that is {payout.status}.",
            current_state=payout.status,
        )


def _parse_amount(amount) -> Decimal:
    try:
        amt = D(amount)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount("Payout amount must be a number.", field="amount")
    if not amt.is_finite():
        raise InvalidAmount("Payout amount must be a number.", field="amount")
    return q2(amt)


def _matches(payout: VendorPayout, *, vendor_id, requester, amount: Decimal, method: str) -> bool:
    return (
        payout.vendor_id == int(vendor_id)
        and payout.requested_by_id == getattr(requester, "pk", None)
        and q2(payout.amount) == amount
        and payout.method == method
    )


def _replay(key: str, **request) -> VendorPayout | None:
    existing = VendorPayout.objects.filter(idempotency_key=key).first()
    if existing is None:
        return None
    if not _matches(existing, **request):
        raise Conflict(
            "Idempotency key was already used for a different payout request.",
            code="idempotency_key_reused",
            field="idempotency_key",
            extra={"payout_id": existing.pk},
        )
    logger.info("payout create replay key=%s payout=%s", key, existing.pk)
    return existing


def create_payout(
    *,
    vendor_id,
    requester,
    amount,
    method: str,
    reference: str = "",
    idempotency_key: str | None = None,
    request_id: str = "",
) -> tuple[VendorPayout, bool]:
    """File a PENDING payout request. Returns (payout, created).

    A retry with the same idempotency key and the same request returns the
    original record with created=False.
    """
    amt = _parse_amount(amount)
    method = (method or "").strip()
    key = (idempotency_key or "").strip() or None

    if key:
        existing = _replay(key, vendor_id=vendor_id, requester=requester, amount=amt, method=method)
        if existing is not None:
            return existing, False

    vendor = get_vendor(vendor_id)
    require_min_role(requester, vendor, "MANAGER")

    minimum = min_payout_amount()
    # zero and negative amounts fall under the same rule
    if amt <= 0 or amt < minimum:
        raise BelowMinimum(
            f"Payout amount must be at least {minimum}.",
            field="amount",
            extra={"minimum": str(minimum)},
        )
    balance = ledger.get_balance(vendor.pk)
    if amt > balance:
        raise InsufficientBalance(
            f"Requested {amt} exceeds available balance {balance}.",
            field="amount",
            extra={"vendor_id": vendor.pk, "balance": str(balance), "requested": str(amt)},
        )

    try:
        with transaction.atomic():
            payout = VendorPayout.objects.create(
                vendor=vendor,
                requested_by=requester if getattr(requester, "pk", None) else None,
                amount=amt,
                method=method,
                reference=reference or "",
                idempotency_key=key,
            )
            log_action(
                requester,
                vendor.pk,
                "payout_requested",
                "VendorPayout",
                payout.pk,
                {"amount": str(amt), "method": method},
                request_id=request_id,
            )
    except IntegrityError:
        # concurrent request with the same idempotency key won the insert
        existing = _replay(key, vendor_id=vendor_id, requester=requester, amount=amt, method=method) if key else None
        if existing is None:
            raise
        return existing, False

    logger.info("payout requested id=%s vendor=%s amount=%s", payout.pk, vendor.pk, amt)
    return payout, True


@transaction.atomic
def approve_payout(payout_id, *, actor, request_id: str = "") -> VendorPayout:
    _require_admin(actor, "approve")
    payout = _lock_payout(payout_id)
    _require_pending(payout, "approve")

    ledger.debit(payout.vendor_id, payout.amount, payout=payout, memo=f"Payout {payout.pk}")
    now = timezone.now()
    updated = VendorPayout.objects.filter(pk=payout.pk, status=PayoutStatus.PENDING).update(
        status=PayoutStatus.COMPLETED,
        processed_at=now,
        decided_by=actor,
        updated_at=now,
    )
    if not updated:  # pragma: no cover - row is locked above
        raise InvalidTransition(current_state=payout.status)

    payout.refresh_from_db()
    log_action(
        actor,
        payout.vendor_id,
        "payout_approved",
        "VendorPayout",
        payout.pk,
        {"amount": str(payout.amount)},
        request_id=request_id,
    )
    logger.info("payout approved id=%s vendor=%s amount=%s", payout.pk, payout.vendor_id, payout.amount)
    return payout


@transaction.atomic
def reject_payout(payout_id, *, actor, reason: str = "", request_id: str = "") -> VendorPayout:
    """Reject a pending payout. The reason is kept in `rejection_reason` and
    appended to the reference; the original reference text is preserved."""
    _require_admin(actor, "reject")
    payout = _lock_payout(payout_id)
    _require_pending(payout, "reject")

    reason = (reason or "").strip()
    reference = payout.reference or ""
    if reason:
        note = f"Rejected: {reason}"
        reference = f"{reference}\n{note}" if reference else note

    updated = VendorPayout.objects.filter(pk=payout.pk, status=PayoutStatus.PENDING).update(
        status=PayoutStatus.REJECTED,
        reference=reference,
        rejection_reason=reason,
        decided_by=actor,
        updated_at=timezone.now(),
    )
    if not updated:  # pragma: no cover - row is locked above
        raise InvalidTransition(current_state=payout.status)

    payout.refresh_from_db()
    log_action(
        actor, payout.vendor_id, "payout_rejected", "VendorPayout", payout.pk, {"reason": reason}, request_id=request_id
    )
    logger.info("payout rejected id=%s vendor=%s", payout.pk, payout.vendor_id)
    return payout


@transaction.atomic
def cancel_payout(payout_id, *, requester, request_id: str = "") -> None:
    """Requester withdraws a pending payout; the record is deleted."""
    payout = _lock_payout(payout_id)
    if payout.requested_by_id is None or payout.requested_by_id != getattr(requester, "pk", None):
        raise Forbidden("Only the requester may cancel this payout.", code="not_requester")
    _require_pending(payout, "cancel")

    deleted, _ = VendorPayout.objects.filter(pk=payout.pk, status=PayoutStatus.PENDING).delete()
    if not deleted:  # pragma: no cover - row is locked above
        raise InvalidTransition(current_state=payout.status)
    log_action(
        requester,
        payout.vendor_id,
        "payout_cancelled",
        "VendorPayout",
        payout_id,
        {"amount": str(payout.amount)},
        request_id=request_id,
    )
    logger.info("payout cancelled id=%s vendor=%s", payout_id, payout.vendor_id)


@transaction.atomic
def bulk_approve_payouts(ids: Iterable, *, actor, request_id: str = "") -> dict:
    """Approve every PENDING payout in `ids` as one unit.

    Ids that are missing or no longer pending are reported as skipped. Each
    vendor's balance is debited once for its total; if any vendor cannot
    cover its total the whole batch fails and nothing changes.
    """
    _require_admin(actor, "approve")
    wanted = sorted({int(i) for i in ids})
    payouts = list(
        VendorPayout.objects.select_for_update()
        .filter(pk__in=wanted, status=PayoutStatus.PENDING)
        .order_by("vendor_id", "id")
    )
    approved = [p.pk for p in payouts]
    skipped = [i for i in wanted if i not in set(approved)]
    if not payouts:
        return {"approved": [], "skipped": skipped, "total_amount": ZERO}

    ledger.debit_batch(payouts)
    now = timezone.now()
    updated = VendorPayout.objects.filter(pk__in=approved, status=PayoutStatus.PENDING).update(
        status=PayoutStatus.COMPLETED,
        processed_at=now,
        decided_by=actor,
        updated_at=now,
    )
    if updated != len(approved):  # pragma: no cover - rows are locked above
        raise InvalidTransition("Payout batch changed while being approved.")

    total = q2(sum((p.amount for p in payouts), ZERO))
    for p in payouts:
        log_action(
            actor,
            p.vendor_id,
            "payout_approved",
            "VendorPayout",
            p.pk,
            {"amount": str(p.amount), "batch": True},
            request_id=request_id,
        )
    logger.info("bulk approved %d payouts total=%s skipped=%s", len(approved), total, skipped)
    return {"approved": approved, "skipped": skipped, "total_amount": total}


def payout_stats(vendor_id=None) -> dict:
    qs = VendorPayout.objects.all()
    if vendor_id is not None:
        qs = qs.filter(vendor_id=vendor_id)
    agg = qs.aggregate(
        total_count=Count("id"),
        pending_count=Count("id", filter=Q(status=PayoutStatus.PENDING)),
        completed_count=Count("id", filter=Q(status=PayoutStatus.COMPLETED)),
        rejected_count=Count("id", filter=Q(status=PayoutStatus.REJECTED)),
        pending_amount=Sum("amount", filter=Q(status=PayoutStatus.PENDING)),
        completed_amount=Sum("amount", filter=Q(status=PayoutStatus.COMPLETED)),
        average_completed=Avg("amount", filter=Q(status=PayoutStatus.COMPLETED)),
    )
    for k in ("pending_amount", "completed_amount", "average_completed"):
        agg[k] = q2(agg[k]) if agg[k] is not None else ZERO
    agg["vendor_id"] = vendor_id
    return agg
