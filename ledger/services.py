"""
Vendor balance ledger.

The balance row is the only contended resource. Every write locks it with
``select_for_update`` and applies a conditional ``UPDATE`` so a debit can
never take the balance below zero, even if two approvals race. Each write
also appends a `LedgerEntry`, so the balance can always be recomputed from
the journal.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone

from core.errors import InsufficientBalance, InvalidAmount, VendorNotFound
from core.models import log_action
from orders.money import D, ZERO, q2
from vendor_app.models import Vendor

from .models import LedgerEntry, VendorBalance

logger = logging.getLogger(__name__)


def get_balance(vendor_id) -> Decimal:
    amount = (
        VendorBalance.objects.filter(vendor_id=vendor_id).values_list("amount", flat=True).first()
    )
    return q2(amount) if amount is not None else ZERO


def _amount(value, *, allow_zero: bool) -> Decimal:
    amt = q2(D(value))
    if amt < 0 or (amt == 0 and not allow_zero):
        raise InvalidAmount(f"Invalid ledger amount {value}.", field="amount")
    return amt


def _lock_balance(vendor_id) -> VendorBalance:
    """Fetch the vendor's balance row under a row lock, creating it on first use."""
    if not Vendor.objects.filter(pk=vendor_id).exists():
        raise VendorNotFound(f"Vendor {vendor_id} does not exist.", field="vendor")
    VendorBalance.objects.get_or_create(vendor_id=vendor_id)
    return VendorBalance.objects.select_for_update().get(vendor_id=vendor_id)


def _insufficient(vendor_id, balance: Decimal, requested: Decimal) -> InsufficientBalance:
    return InsufficientBalance(
        f"Vendor {vendor_id} balance {balance} is less than {requested}.",
        field="amount",
        extra={"vendor_id": vendor_id, "balance": str(balance), "requested": str(requested)},
    )


@transaction.atomic
def credit(vendor_id, amount, *, vendor_order=None, memo: str = "") -> LedgerEntry:
    amt = _amount(amount, allow_zero=True)
    bal = _lock_balance(vendor_id)
    VendorBalance.objects.filter(pk=bal.pk).update(amount=F("amount") + amt)
    bal.refresh_from_db(fields=["amount"])
    entry = LedgerEntry.objects.create(
        vendor_id=vendor_id,
        entry_type=LedgerEntry.EntryType.CREDIT,
        amount=amt,
        balance_after=bal.amount,
        vendor_order=vendor_order,
        memo=memo[:255],
    )
    logger.info("ledger credit vendor=%s amount=%s balance=%s", vendor_id, amt, bal.amount)
    return entry


@transaction.atomic
def debit(vendor_id, amount, *, payout=None, memo: str = "") -> LedgerEntry:
    amt = _amount(amount, allow_zero=False)
    bal = _lock_balance(vendor_id)
    if bal.amount < amt:
        raise _insufficient(vendor_id, q2(bal.amount), amt)
    updated = VendorBalance.objects.filter(pk=bal.pk, amount__gte=amt).update(
        amount=F("amount") - amt
    )
    if not updated:
        bal.refresh_from_db(fields=["amount"])
        raise _insufficient(vendor_id, q2(bal.amount), amt)
    bal.refresh_from_db(fields=["amount"])
    entry = LedgerEntry.objects.create(
        vendor_id=vendor_id,
        entry_type=LedgerEntry.EntryType.DEBIT,
        amount=amt,
        balance_after=bal.amount,
        payout=payout,
        memo=memo[:255],
    )
    logger.info("ledger debit vendor=%s amount=%s balance=%s", vendor_id, amt, bal.amount)
    return entry


@transaction.atomic
def debit_batch(payouts: Iterable) -> list[LedgerEntry]:
    """Debit many payouts with one balance update per vendor.

    Balance rows are locked in ascending vendor id order. If any vendor's
    balance cannot cover its total, nothing is debited.
    """
    by_vendor: dict[int, list] = defaultdict(list)
    for p in payouts:
        by_vendor[p.vendor_id].append(p)

    locked: dict[int, VendorBalance] = {}
    totals: dict[int, Decimal] = {}
    for vid in sorted(by_vendor):
        bal = _lock_balance(vid)
        total = q2(sum((D(p.amount) for p in by_vendor[vid]), ZERO))
        if bal.amount < total:
            raise _insufficient(vid, q2(bal.amount), total)
        locked[vid], totals[vid] = bal, total

    entries: list[LedgerEntry] = []
    for vid in sorted(by_vendor):
        bal, total = locked[vid], totals[vid]
        updated = VendorBalance.objects.filter(pk=bal.pk, amount__gte=total).update(
            amount=F("amount") - total
        )
        if not updated:
            raise _insufficient(vid, q2(bal.amount), total)
        running = q2(bal.amount)
        for p in sorted(by_vendor[vid], key=lambda x: x.pk):
            running -= q2(p.amount)
            entries.append(
                LedgerEntry(
                    vendor_id=vid,
                    entry_type=LedgerEntry.EntryType.DEBIT,
                    amount=q2(p.amount),
                    balance_after=running,
                    payout=p,
                    memo=f"Payout {p.pk}",
                )
            )
        logger.info("ledger batch debit vendor=%s total=%s payouts=%d", vid, total, len(by_vendor[vid]))
    LedgerEntry.objects.bulk_create(entries)
    return entries


def recompute_balance(vendor_id) -> Decimal:
    """Balance implied by the journal: credits minus debits."""
    qs = LedgerEntry.objects.filter(vendor_id=vendor_id)
    credits = qs.filter(entry_type=LedgerEntry.EntryType.CREDIT).aggregate(s=Sum("amount"))["s"]
    debits = qs.filter(entry_type=LedgerEntry.EntryType.DEBIT).aggregate(s=Sum("amount"))["s"]
    return q2(D(credits or ZERO) - D(debits or ZERO))


@transaction.atomic
def repair_balance(vendor_id, *, actor=None, request_id: str = "") -> tuple[Decimal, Decimal]:
    """Overwrite the stored balance with the journal value. Returns (old, new).

    Writes no journal entry; the journal is already the source of truth.
    """
    bal = _lock_balance(vendor_id)
    old = q2(bal.amount)
    new = recompute_balance(vendor_id)
    if new < 0:
        raise InvalidAmount(f"Journal for vendor {vendor_id} sums to {new}.", field="amount")
    if new == old:
        return old, new
    VendorBalance.objects.filter(pk=bal.pk).update(amount=new, updated_at=timezone.now())
    log_action(
        actor,
        vendor_id,
        "balance_repaired",
        "VendorBalance",
        bal.pk,
        {"from": str(old), "to": str(new)},
        request_id=request_id,
    )
    logger.warning("ledger balance repaired vendor=%s from=%s to=%s", vendor_id, old, new)
    return old, new
