import factory
from customer.models import Address
from factory.django import DjangoModelFactory


class AddressFactory(DjangoModelFactory):
    class Meta:
        model = Address

    user = factory.SubFactory("cart.tests.factories.UserFactory")
    title = "Home"
    name = factory.Faker("name")
    addr1 = factory.Sequence(lambda n: f"{n} Main Street")
    city = "Lagos"
    state = "Lagos"
    postal_code = "100001"
    country_code = "NG"
