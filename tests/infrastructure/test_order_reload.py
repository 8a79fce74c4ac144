"""OrderHub.initialize against real order directories containing stray files."""

import pytest

from shophub.application.order_hub import OrderHub
from shophub.domain.exceptions import StorageError
from shophub.domain.model.order import CustomerTier, OrderState
from shophub.infrastructure.persistence.order_file_store import FileOrderStore
from tests.fakes import FakeOrderIdGenerator


@pytest.fixture
def store(tmp_path):
    store = FileOrderStore(tmp_path / "orders")
    store.ensure_directories()
    return store


@pytest.fixture
def hub(store):
    hub = OrderHub(store, FakeOrderIdGenerator())
    yield hub
    hub.shutdown()


class TestReload:

    def test_zero_padded_name_is_not_loaded(self, hub, store):
        ordered = store.path_for(OrderState.ORDERED)
        store.create(ordered, 2, "State: Ordered\nCustomerType: VIP\n")
        (ordered / "007.txt").write_text("State: Ordered\n", encoding="utf-8")

        hub.initialize()

        assert hub.order_map() == {2: OrderState.ORDERED}
        assert hub.customer_tier(2) is CustomerTier.VIP

    def test_undecodable_file_loads_as_standard(self, hub, store):
        ordered = store.path_for(OrderState.ORDERED)
        (ordered / "3.txt").write_bytes(b"State: Ordered\nCustomerType: \xff\xfe\n")
        store.create(ordered, 4, "State: Ordered\nCustomerType: Prime\n")

        hub.initialize()

        assert hub.order_map() == {3: OrderState.ORDERED, 4: OrderState.ORDERED}
        assert hub.customer_tier(3) is CustomerTier.STANDARD
        assert hub.customer_tier(4) is CustomerTier.PRIME

    def test_undecodable_details_raise_storage_error(self, hub, store):
        ordered = store.path_for(OrderState.ORDERED)
        (ordered / "3.txt").write_bytes(b"State: Ordered\n\xff\n")
        hub.initialize()

        with pytest.raises(StorageError):
            hub.get_order_details(3)
        with pytest.raises(StorageError):
            hub.change_order_state(3, OrderState.READY)
        assert hub.order_map() == {3: OrderState.ORDERED}
