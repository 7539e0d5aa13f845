from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from rest_framework.test import APIClient

from commissions.services import set_current
from ledger.services import get_balance
from orders.models import Order, OrderItem, OrderStatus, VendorOrder

pytestmark = pytest.mark.django_db


def make_order(*vendor_prices):
    order = Order.objects.create()
    for vendor, price in vendor_prices:
        OrderItem.objects.create(order=order, vendor=vendor, product_name="Tee", price=Decimal(price))
    order.total_amount = order.compute_total()
    order.save(update_fields=["total_amount"])
    return order


def client_for(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


def test_split_endpoint_admin_only(vendor_factory, platform_admin):
    a, b = vendor_factory(name="A"), vendor_factory(name="B")
    order = make_order((a, "10.00"), (b, "15.00"))

    r = client_for(a.owner).post(f"/apis/v1/orders/{order.pk}/split/")
    assert r.status_code == 403

    r = client_for(platform_admin).post(f"/apis/v1/orders/{order.pk}/split/")
    assert r.status_code == 201, r.content
    assert [row["vendor"] for row in r.data] == [a.pk, b.pk]
    assert [row["total_amount"] for row in r.data] == ["10.00", "15.00"]

    r = client_for(platform_admin).post(f"/apis/v1/orders/{order.pk}/split/")
    assert r.status_code == 409
    assert r.data["kind"] == "Conflict"
    assert r.data["code"] == "duplicate_vendor_order"


def test_split_missing_order_is_404(platform_admin):
    r = client_for(platform_admin).post("/apis/v1/orders/424242/split/")
    assert r.status_code == 404
    assert r.data["kind"] == "NotFound"


def test_vendor_sees_only_own_vendor_orders(vendor_factory, platform_admin):
    a, b = vendor_factory(name="A"), vendor_factory(name="B")
    client_for(platform_admin).post(f"/apis/v1/orders/{make_order((a, '10.00'), (b, '5.00')).pk}/split/")

    r = client_for(a.owner).get("/apis/v1/orders/vendor-orders/")
    assert r.status_code == 200
    assert r.data["count"] == 1
    assert r.data["results"][0]["vendor"] == a.pk
    assert r.data["results"][0]["items"][0]["line_total"] == "10.00"

    other = VendorOrder.objects.get(vendor=b)
    assert client_for(a.owner).get(f"/apis/v1/orders/vendor-orders/{other.pk}/").status_code == 404

    r = client_for(platform_admin).get("/apis/v1/orders/vendor-orders/")
    assert r.data["count"] == 2


def test_status_walk_settles_on_delivery(vendor_factory, user_factory, platform_admin):
    set_current("20")
    vendor = vendor_factory(name="A")
    staff = user_factory()
    vendor.add_member(staff, "STAFF")
    order = make_order((vendor, "80.00"))
    client_for(platform_admin).post(f"/apis/v1/orders/{order.pk}/split/")
    vo = VendorOrder.objects.get(order=order)

    c = client_for(staff)
    for st in ("CONFIRMED", "PROCESSING", "SHIPPED"):
        r = c.post(f"/apis/v1/orders/vendor-orders/{vo.pk}/status/", {"status": st}, format="json")
        assert r.status_code == 200, r.content
        assert r.data["is_settled"] is False

    r = c.post(f"/apis/v1/orders/vendor-orders/{vo.pk}/status/", {"status": "DELIVERED"}, format="json")
    assert r.status_code == 200
    assert r.data["is_settled"] is True
    assert r.data["vendor_amount"] == "64.00"
    assert get_balance(vendor.pk) == Decimal("64.00")

    r = c.post(f"/apis/v1/orders/vendor-orders/{vo.pk}/status/", {"status": "SHIPPED"}, format="json")
    assert r.status_code == 409
    assert r.data["kind"] == "InvalidTransition"
    assert r.data["current_state"] == "DELIVERED"

    r = client_for(platform_admin).post(f"/apis/v1/orders/vendor-orders/{vo.pk}/settle/")
    assert r.status_code == 200
    assert r.data["credited"] is False
    assert get_balance(vendor.pk) == Decimal("64.00")


def test_settle_requires_admin(vendor_factory, platform_admin):
    vendor = vendor_factory(name="A")
    order = make_order((vendor, "10.00"))
    client_for(platform_admin).post(f"/apis/v1/orders/{order.pk}/split/")
    vo = VendorOrder.objects.get(order=order)

    assert client_for(vendor.owner).post(f"/apis/v1/orders/vendor-orders/{vo.pk}/settle/").status_code == 403
    r = client_for(platform_admin).post(f"/apis/v1/orders/vendor-orders/{vo.pk}/settle/")
    assert r.status_code == 409
    assert r.data["current_state"] == "PENDING"


def test_filter_by_settled(vendor_factory, platform_admin):
    vendor = vendor_factory(name="A")
    o1, o2 = make_order((vendor, "10.00")), make_order((vendor, "20.00"))
    admin = client_for(platform_admin)
    admin.post(f"/apis/v1/orders/{o1.pk}/split/")
    admin.post(f"/apis/v1/orders/{o2.pk}/split/")
    vo = VendorOrder.objects.get(order=o1)
    for st in ("CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED"):
        admin.post(f"/apis/v1/orders/vendor-orders/{vo.pk}/status/", {"status": st}, format="json")

    r = admin.get("/apis/v1/orders/vendor-orders/", {"settled": "true"})
    assert [row["id"] for row in r.data["results"]] == [vo.pk]
    r = admin.get("/apis/v1/orders/vendor-orders/", {"settled": "false"})
    assert [row["order"] for row in r.data["results"]] == [o2.pk]


def test_split_orders_command(vendor_factory):
    vendor = vendor_factory(name="A")
    ok = make_order((vendor, "10.00"))
    bad = make_order((vendor, "10.00"))
    Order.objects.filter(pk=bad.pk).update(total_amount=Decimal("99.00"))
    Order.objects.create()  # no items: not a candidate
    void = make_order((vendor, "10.00"))
    Order.objects.filter(pk=void.pk).update(status=OrderStatus.CANCELLED)

    out = StringIO()
    call_command("split_orders", "--dry-run", stdout=out)
    assert f"would split 2 order(s): [{ok.pk}, {bad.pk}]" in out.getvalue()
    assert not VendorOrder.objects.exists()

    out = StringIO()
    call_command("split_orders", stdout=out)
    assert "split=1 failed=1" in out.getvalue()
    assert VendorOrder.objects.filter(order=ok).count() == 1

    with pytest.raises(CommandError):
        call_command("split_orders", "--order-id", str(bad.pk), stdout=StringIO())
