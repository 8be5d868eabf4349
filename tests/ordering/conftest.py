import pytest
from ordering.gateways import reset_gateways, set_gateways
from ordering.gateways.fake_adapter import FakeCartService, FakeCatalogService, FakeProfileService
from ordering.publisher import reset_publisher, set_publisher
from ordering.publisher.fake_adapter import RecordingPublisher
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def cart_service():
    return FakeCartService()


@pytest.fixture()
def catalog_service():
    return FakeCatalogService()


@pytest.fixture()
def profile_service():
    return FakeProfileService()


@pytest.fixture()
def publisher():
    return RecordingPublisher()


@pytest.fixture(autouse=True)
def _fake_collaborators(cart_service, catalog_service, profile_service, publisher):
    set_gateways(cart=cart_service, catalog=catalog_service, profile=profile_service)
    set_publisher(publisher)
    yield
    reset_gateways()
    reset_publisher()


@pytest.fixture()
def buyer(profile_service):
    """A user whose profile is complete enough to check out."""
    profile_service.put_user("user-001", phone_number="+380501112233", display_name="Olena Koval")
    return "user-001"


@pytest.fixture()
def serve_stale_order(monkeypatch):
    """Hand the next ``get_order`` call a copy of the order loaded earlier.

    Reproduces two requests that read the same order before either of them
    saved it. Later lookups hit the store again.
    """
    from ordering.order.order import Order

    def _serve(stale):
        repo_cls = type(current_domain.repository_for(Order))
        original = repo_cls.get_order
        served = []

        def get_order(self, order_id):
            if not served:
                served.append(order_id)
                return stale
            return original(self, order_id)

        monkeypatch.setattr(repo_cls, "get_order", get_order)

    return _serve
