import pytest
from django.contrib.auth import get_user_model


@pytest.fixture
def user_factory(db):
    User = get_user_model()
    counter = {"i": 0}

    def make(**kwargs):
        counter["i"] += 1
        return User.objects.create_user(
            username=kwargs.pop("username", f"u{counter['i']}"),
            email=kwargs.pop("email", f"u{counter['i']}@e.com"),
            password=kwargs.pop("password", "pass"),
            **kwargs,
        )

    return make


@pytest.fixture
def platform_admin(user_factory):
    return user_factory(username="ops", email="ops@e.com", is_staff=True)


@pytest.fixture
def vendor_factory(user_factory):
    from vendor_app.services import create_vendor

    def make(name: str = "Shop", owner=None, **fields):
        owner = owner or user_factory()
        return create_vendor(owner, name=name, **fields)

    return make
