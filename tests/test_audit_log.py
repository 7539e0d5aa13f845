from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from core.models import AuditLog, log_action
from ledger.services import credit


@pytest.mark.django_db
def test_log_action_stores_actor_and_meta(user_factory):
    actor = user_factory()
    row = log_action(actor, 7, "payout_requested", "VendorPayout", 12, {"amount": "10.00"})
    assert row.actor == actor
    assert row.target_id == "12"
    assert row.meta == {"amount": "10.00"}


@pytest.mark.django_db
def test_log_action_accepts_anonymous():
    row = log_action(None, None, "order_split", "Order", 1)
    assert row.actor is None
    assert row.meta == {}


@pytest.mark.django_db
def test_money_and_policy_actions_are_audited(vendor_factory, platform_admin):
    vendor = vendor_factory(name="Audited")
    credit(vendor.pk, Decimal("50.00"))

    admin = APIClient()
    admin.force_authenticate(user=platform_admin)
    admin.put("/apis/v1/commission/current/", {"percentage": "12.5"}, format="json")

    owner = APIClient()
    owner.force_authenticate(user=vendor.owner)
    r = owner.post(
        "/apis/v1/payouts/",
        {"vendor_id": vendor.pk, "amount": "20.00", "method": "bank"},
        format="json",
    )
    assert r.status_code == 201
    admin.post(f"/apis/v1/payouts/{r.data['id']}/approve/")

    actions = set(AuditLog.objects.values_list("action", flat=True))
    assert {"vendor_created", "commission_set", "payout_requested", "payout_approved"} <= actions
    approved = AuditLog.objects.get(action="payout_approved")
    assert approved.actor == platform_admin
    assert approved.vendor_id == vendor.pk


@pytest.mark.django_db
def test_request_id_reaches_audit_rows(vendor_factory, platform_admin):
    admin = APIClient()
    admin.force_authenticate(user=platform_admin)

    r = admin.post("/apis/v1/commission/reset/", HTTP_X_REQUEST_ID="rid-123")
    assert r.status_code == 201
    assert r["X-Request-ID"] == "rid-123"
    assert AuditLog.objects.get(action="commission_reset").request_id == "rid-123"

    vendor = vendor_factory(name="Traced")
    credit(vendor.pk, Decimal("50.00"))
    owner = APIClient()
    owner.force_authenticate(user=vendor.owner)
    r = owner.post(
        "/apis/v1/payouts/",
        {"vendor_id": vendor.pk, "amount": "20.00", "method": "bank"},
        format="json",
        HTTP_X_REQUEST_ID="rid-req",
    )
    assert r.status_code == 201
    admin.post(f"/apis/v1/payouts/{r.data['id']}/approve/", HTTP_X_REQUEST_ID="rid-ok")

    assert AuditLog.objects.get(action="payout_requested").request_id == "rid-req"
    assert AuditLog.objects.get(action="payout_approved").request_id == "rid-ok"


@pytest.mark.django_db
def test_audit_rows_get_generated_request_id_when_header_missing(platform_admin):
    admin = APIClient()
    admin.force_authenticate(user=platform_admin)
    r = admin.post("/apis/v1/commission/reset/")
    row = AuditLog.objects.get(action="commission_reset")
    assert row.request_id
    assert row.request_id == r["X-Request-ID"]
