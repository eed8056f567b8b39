import pytest
from cart.tests.factories import UserFactory
from customer.services import ensure_address_owner
from customer.tests.factories import AddressFactory
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction


@pytest.mark.django_db
def test_address_unique_per_user():
    address = AddressFactory()
    with pytest.raises(IntegrityError), transaction.atomic():
        AddressFactory(
            user=address.user,
            addr1=address.addr1,
            city=address.city,
            postal_code=address.postal_code,
            country_code=address.country_code,
        )


@pytest.mark.django_db
def test_contact_phone_prefers_address_then_user():
    user = UserFactory(phone="+2348032222222")
    assert AddressFactory(user=user, phone="+2347011111111").contact_phone() == "+2347011111111"
    assert AddressFactory(user=user, phone="").contact_phone() == "+2348032222222"


@pytest.mark.django_db
def test_contact_phone_none_when_no_values():
    assert AddressFactory(user=UserFactory(phone=""), phone="").contact_phone() is None


@pytest.mark.django_db
def test_ensure_address_owner():
    address = AddressFactory()
    ensure_address_owner(address.user, address)

    with pytest.raises(ValidationError):
        ensure_address_owner(UserFactory(), address)
    with pytest.raises(ValidationError):
        ensure_address_owner(address.user, None)
