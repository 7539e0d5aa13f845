from datetime import timedelta
from decimal import Decimal

import pytest
from django.test import override_settings
from django.utils import timezone

from commissions import services
from commissions.models import CommissionSetting
from core.errors import InvalidCommission
from core.models import AuditLog

pytestmark = pytest.mark.django_db


def test_get_current_defaults_to_zero_on_empty_log():
    current = services.get_current()
    assert current.percentage == Decimal("0.00")
    assert current.is_default is True
    assert current.setting_id is None


def test_set_current_creates_first_row_then_updates_it():
    first = services.set_current("10")
    assert CommissionSetting.objects.count() == 1
    second = services.set_current(Decimal("12.5"))
    assert CommissionSetting.objects.count() == 1
    assert second.setting_id == first.setting_id
    assert services.get_current().percentage == Decimal("12.50")


@pytest.mark.parametrize("pct", ["-1", "50.01", "100"])
def test_set_current_enforces_business_ceiling(pct):
    with pytest.raises(InvalidCommission):
        services.set_current(pct)
    assert CommissionSetting.objects.count() == 0


def test_set_current_accepts_ceiling_value():
    assert services.set_current("50").percentage == Decimal("50.00")


@override_settings(COMMISSION_MAX_PERCENT="30")
def test_ceiling_is_configurable():
    with pytest.raises(InvalidCommission) as exc:
        services.set_current("35")
    assert exc.value.extra["max_percent"] == "30"


def test_reset_appends_and_keeps_prior_row():
    services.set_current("20")
    before = len(services.history())
    services.reset_to_default()
    rows = services.history()
    assert len(rows) == before + 1
    assert rows[0].commission == Decimal("20.00")
    assert services.get_current().percentage == Decimal("0.00")
    assert services.get_current().is_default is False


def test_history_is_non_decreasing_in_updated_at():
    services.set_current("5")
    services.reset_to_default()
    services.set_current("7")
    services.reset_to_default()
    rows = services.history()
    stamps = [r.updated_at for r in rows]
    assert stamps == sorted(stamps)
    assert len(rows) == 3


def test_history_bounds_are_inclusive():
    services.set_current("5")
    row = CommissionSetting.objects.get()
    today = timezone.localdate()

    assert services.history(from_date=today, to_date=today) == [row]
    assert services.history(from_date=row.updated_at, to_date=row.updated_at) == [row]
    assert services.history(from_date=row.updated_at + timedelta(seconds=1)) == []
    assert services.history(to_date=today - timedelta(days=1)) == []


def test_stats_reports_last_ten_oldest_first():
    services.set_current("1")
    for _ in range(11):
        services.reset_to_default()
    out = services.stats()
    assert out["total_changes"] == 12
    assert len(out["recent"]) == 10
    ids = [r.pk for r in out["recent"]]
    assert ids == sorted(ids)
    assert ids[-1] == CommissionSetting.objects.latest().pk


def test_vendor_override_wins(vendor_factory):
    services.set_current("10")
    plain = vendor_factory(name="Plain")
    special = vendor_factory(name="Special", commission_pct=Decimal("3.5"))
    assert services.resolve_vendor_percentage(plain) == Decimal("10.00")
    assert services.resolve_vendor_percentage(special) == Decimal("3.50")


def test_policy_changes_are_audited(platform_admin):
    services.set_current("10", actor=platform_admin)
    services.reset_to_default(actor=platform_admin)
    actions = list(AuditLog.objects.order_by("id").values_list("action", flat=True))
    assert actions == ["commission_set", "commission_reset"]
