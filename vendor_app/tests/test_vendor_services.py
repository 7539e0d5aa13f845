from decimal import Decimal

import pytest

from core.errors import InvalidCommission, Unauthorized, VendorInUse, VendorNotFound
from core.models import AuditLog
from ledger.services import credit
from orders.models import Order, OrderItem
from payouts.models import VendorPayout
from vendor_app import services
from vendor_app.models import Vendor, VendorMember, VendorStatus

pytestmark = pytest.mark.django_db


def test_create_vendor_enrolls_owner_and_sets_role(user_factory):
    owner = user_factory()
    vendor = services.create_vendor(owner, name="Acme")
    owner.refresh_from_db()
    assert vendor.status == VendorStatus.PENDING
    assert VendorMember.objects.filter(vendor=vendor, user=owner, role="OWNER").exists()
    assert owner.role == owner.Role.VENDOR
    assert AuditLog.objects.filter(action="vendor_created", vendor_id=vendor.pk).exists()


def test_create_vendor_dedupes_slug(user_factory):
    a = services.create_vendor(user_factory(), name="Twin")
    b = services.create_vendor(user_factory(), name="Twin")
    assert a.slug == "twin"
    assert b.slug == "twin-2"


def test_get_vendor_not_found():
    with pytest.raises(VendorNotFound):
        services.get_vendor(4242)


def test_status_change_is_admin_only(vendor_factory, platform_admin):
    vendor = vendor_factory()
    with pytest.raises(Unauthorized):
        services.set_vendor_status(vendor.pk, VendorStatus.APPROVED, actor=vendor.owner)
    vendor = services.set_vendor_status(vendor.pk, VendorStatus.APPROVED, actor=platform_admin)
    assert vendor.status == VendorStatus.APPROVED


def test_commission_override_bounds(vendor_factory, platform_admin):
    vendor = vendor_factory()
    vendor = services.set_vendor_commission(vendor.pk, "7.5", actor=platform_admin)
    assert vendor.commission_pct == Decimal("7.5")

    with pytest.raises(InvalidCommission):
        services.set_vendor_commission(vendor.pk, "101", actor=platform_admin)

    vendor = services.set_vendor_commission(vendor.pk, None, actor=platform_admin)
    assert vendor.commission_pct is None


def test_delete_vendor_without_records(vendor_factory):
    vendor = vendor_factory()
    services.delete_vendor(vendor.pk, actor=vendor.owner)
    assert not Vendor.objects.filter(pk=vendor.pk).exists()


def test_delete_vendor_rejects_non_owner(vendor_factory, user_factory):
    vendor = vendor_factory()
    with pytest.raises(Unauthorized):
        services.delete_vendor(vendor.pk, actor=user_factory())


def test_delete_vendor_with_order_items_is_blocked(vendor_factory):
    vendor = vendor_factory()
    order = Order.objects.create(total_amount=Decimal("5.00"))
    OrderItem.objects.create(order=order, vendor=vendor, product_name="Tee", price=Decimal("5.00"))
    with pytest.raises(VendorInUse) as exc:
        services.delete_vendor(vendor.pk, actor=vendor.owner)
    assert exc.value.extra["order_items"] == 1
    assert Vendor.objects.filter(pk=vendor.pk).exists()


def test_delete_vendor_with_payouts_is_blocked(vendor_factory):
    vendor = vendor_factory()
    credit(vendor.pk, "50.00")
    VendorPayout.objects.create(vendor=vendor, requested_by=vendor.owner, amount=Decimal("20.00"), method="bank")
    with pytest.raises(VendorInUse):
        services.delete_vendor(vendor.pk, actor=vendor.owner)
