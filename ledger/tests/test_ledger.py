from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from core.errors import InsufficientBalance, InvalidAmount, VendorNotFound
from core.models import AuditLog
from ledger import services as ledger
from ledger.models import LedgerEntry, VendorBalance
from payouts.models import VendorPayout

pytestmark = pytest.mark.django_db


def payout(vendor, amount):
    return VendorPayout.objects.create(vendor=vendor, amount=Decimal(amount), method="bank")


def test_balance_starts_at_zero(vendor_factory):
    v = vendor_factory()
    assert ledger.get_balance(v.pk) == Decimal("0.00")
    assert not VendorBalance.objects.filter(vendor=v).exists()


def test_credit_then_debit_journals_both(vendor_factory):
    v = vendor_factory()
    c = ledger.credit(v.pk, "100.005", memo="first")
    assert c.amount == Decimal("100.01")
    assert c.balance_after == Decimal("100.01")

    d = ledger.debit(v.pk, Decimal("40.01"))
    assert d.entry_type == LedgerEntry.EntryType.DEBIT
    assert d.balance_after == Decimal("60.00")
    assert ledger.get_balance(v.pk) == Decimal("60.00")
    assert ledger.recompute_balance(v.pk) == Decimal("60.00")


def test_zero_credit_is_recorded(vendor_factory):
    v = vendor_factory()
    entry = ledger.credit(v.pk, 0)
    assert entry.amount == Decimal("0.00")
    assert ledger.get_balance(v.pk) == Decimal("0.00")


def test_invalid_amounts(vendor_factory):
    v = vendor_factory()
    with pytest.raises(InvalidAmount):
        ledger.credit(v.pk, "-1")
    with pytest.raises(InvalidAmount):
        ledger.debit(v.pk, 0)


def test_unknown_vendor(db):
    with pytest.raises(VendorNotFound):
        ledger.credit(31337, "5")


def test_overdraw_leaves_balance_untouched(vendor_factory):
    v = vendor_factory()
    ledger.credit(v.pk, "25.00")
    with pytest.raises(InsufficientBalance) as exc:
        ledger.debit(v.pk, "25.01")
    assert exc.value.extra == {"vendor_id": v.pk, "balance": "25.00", "requested": "25.01"}
    assert ledger.get_balance(v.pk) == Decimal("25.00")
    assert LedgerEntry.objects.filter(vendor=v).count() == 1

    ledger.debit(v.pk, "25.00")
    assert ledger.get_balance(v.pk) == Decimal("0.00")


def test_debit_batch_one_entry_per_payout(vendor_factory):
    a, b = vendor_factory(name="A"), vendor_factory(name="B")
    ledger.credit(a.pk, "100.00")
    ledger.credit(b.pk, "50.00")
    pa1, pa2, pb = payout(a, "30.00"), payout(a, "20.00"), payout(b, "50.00")

    entries = ledger.debit_batch([pb, pa2, pa1])
    assert len(entries) == 3
    assert ledger.get_balance(a.pk) == Decimal("50.00")
    assert ledger.get_balance(b.pk) == Decimal("0.00")

    after = {e.payout_id: e.balance_after for e in LedgerEntry.objects.filter(entry_type="DEBIT")}
    assert after == {pa1.pk: Decimal("70.00"), pa2.pk: Decimal("50.00"), pb.pk: Decimal("0.00")}


def test_debit_batch_is_all_or_nothing(vendor_factory):
    a, b = vendor_factory(name="A"), vendor_factory(name="B")
    ledger.credit(a.pk, "100.00")
    ledger.credit(b.pk, "10.00")

    with pytest.raises(InsufficientBalance):
        ledger.debit_batch([payout(a, "60.00"), payout(b, "10.01")])
    assert ledger.get_balance(a.pk) == Decimal("100.00")
    assert ledger.get_balance(b.pk) == Decimal("10.00")
    assert not LedgerEntry.objects.filter(entry_type="DEBIT").exists()


def test_reconcile_reports_and_fixes_drift(vendor_factory):
    a, b = vendor_factory(name="A"), vendor_factory(name="B")
    ledger.credit(a.pk, "10.00")
    ledger.credit(b.pk, "20.00")
    VendorBalance.objects.filter(vendor=b).update(amount=Decimal("25.00"))

    out = StringIO()
    call_command("reconcile_balances", stdout=out)
    assert "checked=2 drifted=1" in out.getvalue()
    assert ledger.get_balance(b.pk) == Decimal("25.00")

    out = StringIO()
    call_command("reconcile_balances", "--vendor-id", str(b.pk), "--fix", stdout=out)
    assert ledger.get_balance(b.pk) == Decimal("20.00")
    assert AuditLog.objects.filter(action="balance_repaired", vendor_id=b.pk).count() == 1
    assert LedgerEntry.objects.filter(vendor=b).count() == 1

    out = StringIO()
    call_command("reconcile_balances", stdout=out)
    assert "checked=2 drifted=0" in out.getvalue()


def test_repair_balance_uses_journal_value(vendor_factory, platform_admin):
    v = vendor_factory()
    ledger.credit(v.pk, "50.00")
    ledger.debit(v.pk, "20.00")
    VendorBalance.objects.filter(vendor=v).update(amount=Decimal("7.00"))

    old, new = ledger.repair_balance(v.pk, actor=platform_admin, request_id="rid-fix")
    assert (old, new) == (Decimal("7.00"), Decimal("30.00"))
    assert ledger.get_balance(v.pk) == Decimal("30.00")

    row = AuditLog.objects.get(action="balance_repaired")
    assert row.actor == platform_admin
    assert row.request_id == "rid-fix"
    assert row.meta == {"from": "7.00", "to": "30.00"}


def test_repair_balance_is_a_noop_without_drift(vendor_factory):
    v = vendor_factory()
    ledger.credit(v.pk, "5.00")
    assert ledger.repair_balance(v.pk) == (Decimal("5.00"), Decimal("5.00"))
    assert not AuditLog.objects.filter(action="balance_repaired").exists()


def test_repair_balance_unknown_vendor():
    with pytest.raises(VendorNotFound):
        ledger.repair_balance(999999)
