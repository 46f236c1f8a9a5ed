import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def fulfillment_bed():
    from fulfillment.domain import fulfillment

    bed = DomainFixture(fulfillment)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(fulfillment_bed):
    with fulfillment_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def config():
    from fulfillment.config import FulfillmentConfig

    return FulfillmentConfig(
        drive_root_id="root-folder",
        sheet_id="sheet-1",
        ops_chat_handle="ops-room",
        ops_email="ops@example.com",
        sender_email="studio@example.com",
        sender_name="Rhythm Studio",
    )


@pytest.fixture()
def services():
    from bundles.catalog import CatalogStore
    from fulfillment.services import FulfillmentServices

    return FulfillmentServices.from_registry(catalog=CatalogStore())


@pytest.fixture()
def order_form():
    return {
        "email": "maya@example.com",
        "name": "Maya Garcia",
        "tier": "Full blueprint",
        "birthdate": "1990-04-12",
        "birthplace": "Taos, NM",
        "household_type": "Family homeschool crew",
        "focus": "Play + morning basket",
        "telegram_chat_id": "maya-chat",
    }
