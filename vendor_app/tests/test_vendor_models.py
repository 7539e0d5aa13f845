import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError

from vendor_app.models import Vendor, VendorMember
from vendor_app.services import can_act_for_vendor, has_min_role

pytestmark = pytest.mark.django_db


def create_user(email: str, username: str, **extra):
    User = get_user_model()
    return User.objects.create_user(username=username, email=email, password="x", **extra)


def test_slug_is_derived_from_name():
    owner = create_user("o@example.com", "o")
    v = Vendor.objects.create(name="Acme Goods", owner=owner)
    assert v.slug == "acme-goods"


def test_one_vendor_per_owner():
    owner = create_user("o@example.com", "o")
    Vendor.objects.create(name="A", slug="a", owner=owner)
    with pytest.raises(IntegrityError):
        Vendor.objects.create(name="B", slug="b", owner=owner)


def test_owner_unique_per_vendor():
    owner = create_user("owner@example.com", "owner")
    u2 = create_user("u2@example.com", "u2")
    vendor = Vendor.objects.create(name="Acme", slug="acme", owner=owner)
    VendorMember.objects.create(vendor=vendor, user=owner, role=VendorMember.Role.OWNER)
    with pytest.raises(IntegrityError):
        VendorMember.objects.create(vendor=vendor, user=u2, role=VendorMember.Role.OWNER)


def test_add_member_reactivates_and_updates_role():
    owner = create_user("owner3@example.com", "owner3")
    staff = create_user("staff3@example.com", "staff3")
    vendor = Vendor.objects.create(name="Gamma", slug="gamma", owner=owner)

    m = vendor.add_member(staff, "STAFF")
    m.is_active = False
    m.save(update_fields=["is_active"])
    assert not VendorMember.objects.filter(vendor=vendor, user=staff, is_active=True).exists()

    m2 = vendor.add_member(staff, "manager")
    assert m2.pk == m.pk
    assert m2.is_active is True
    assert m2.role == VendorMember.Role.MANAGER

    with pytest.raises(ValueError):
        vendor.add_member(staff, "janitor")


def test_role_ranking():
    owner = create_user("own@example.com", "own")
    manager = create_user("mgr@example.com", "mgr")
    staff = create_user("stf@example.com", "stf")
    outsider = create_user("out@example.com", "out")
    admin = create_user("adm@example.com", "adm", role="admin")

    vendor = Vendor.objects.create(name="Org", slug="org", owner=owner)
    vendor.add_member(manager, "MANAGER")
    vendor.add_member(staff, "STAFF")

    # the owner counts as OWNER even without a membership row
    assert has_min_role(owner, vendor, "OWNER") is True
    assert has_min_role(manager, vendor, "MANAGER") is True
    assert has_min_role(manager, vendor, "OWNER") is False
    assert has_min_role(staff, vendor, "STAFF") is True
    assert has_min_role(staff, vendor, "MANAGER") is False
    assert has_min_role(outsider, vendor, "STAFF") is False

    assert can_act_for_vendor(admin, vendor) is True
    assert can_act_for_vendor(manager, vendor) is True
    assert can_act_for_vendor(staff, vendor) is False
    assert can_act_for_vendor(outsider, vendor) is False
