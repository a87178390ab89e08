import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def add_product():
    """Add a product to the catalogue and return its id."""
    from storefront.catalogue.management import AddProduct

    def _add(name="Widget", price=10.0, quantity=5, **extra):
        return current_domain.process(
            AddProduct(name=name, price=price, quantity=quantity, **extra),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def shipping_address():
    return {
        "full_name": "Jane Doe",
        "address": "123 Main Street, Apt 4",
        "city": "Springfield",
        "postal_code": "12345",
        "country": "USA",
    }
