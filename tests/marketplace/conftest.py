import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from marketplace.catalogue.management import AddFoodItem, RegisterRestaurant
from marketplace.order.dispatch import reset_dispatcher

OWNER_ID = "owner-001"
CUSTOMER_ID = "cust-001"
PARTNER_ID = "partner-001"


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed, monkeypatch):
    monkeypatch.setenv("DELIVERY_DISPATCH", "fixed")
    monkeypatch.setenv("DELIVERY_PARTNER_ID", PARTNER_ID)
    reset_dispatcher()

    with marketplace_bed.domain_context():
        yield

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()

    reset_dispatcher()


@pytest.fixture()
def restaurant_id():
    """A registered restaurant owned by OWNER_ID."""
    return current_domain.process(
        RegisterRestaurant(
            owner_id=OWNER_ID,
            name="Spice Route",
            address="12 MG Road, Bengaluru",
            phone="080-1234567",
        ),
        asynchronous=False,
    )


@pytest.fixture()
def other_restaurant_id():
    return current_domain.process(
        RegisterRestaurant(owner_id="owner-002", name="Noodle Bar", address="4 Park Street, Kolkata"),
        asynchronous=False,
    )


@pytest.fixture()
def add_food(restaurant_id):
    """Factory that adds a food item to ``restaurant_id`` (or another restaurant)."""

    def _add(**overrides):
        defaults = {
            "user_id": OWNER_ID,
            "restaurant_id": restaurant_id,
            "name": "Paneer Tikka",
            "price": 100.0,
            "max_quantity": 5,
            "preparation_time": 20,
        }
        defaults.update(overrides)
        return current_domain.process(AddFoodItem(**defaults), asynchronous=False)

    return _add


@pytest.fixture()
def food_id(add_food):
    return add_food()
