"""Tests for the file-backed order ID counter."""

import threading

from shophub.domain.model.order import OrderState
from shophub.infrastructure.persistence.order_counter import FileOrderCounter
from shophub.infrastructure.persistence.order_file_store import FileOrderStore


def _setup(tmp_path) -> tuple[FileOrderCounter, FileOrderStore]:
    store = FileOrderStore(tmp_path / "orders")
    store.ensure_directories()
    return FileOrderCounter(store, tmp_path / "orders" / "order_counter.txt"), store


class TestFileOrderCounter:

    def test_starts_at_one(self, tmp_path):
        counter, _ = _setup(tmp_path)
        assert counter.next_id() == 1
        assert counter.next_id() == 2

    def test_continues_after_highest_file_in_any_state(self, tmp_path):
        counter, store = _setup(tmp_path)
        store.create(store.path_for(OrderState.ORDERED), 3, "State: Ordered\n")
        store.create(store.path_for(OrderState.COLLECTED), 8, "State: Collected\n")
        assert counter.next_id() == 9

    def test_persists_between_instances(self, tmp_path):
        counter, _ = _setup(tmp_path)
        for _ in range(4):
            counter.next_id()
        again, _ = _setup(tmp_path)
        assert again.next_id() == 5
        assert (tmp_path / "orders" / "order_counter.txt").read_text().strip() == "5"

    def test_no_reuse_after_collected_is_cleared(self, tmp_path):
        counter, store = _setup(tmp_path)
        collected = store.path_for(OrderState.COLLECTED)
        order_id = counter.next_id()
        store.create(collected, order_id, "State: Collected\n")
        (collected / f"{order_id}.txt").unlink()
        again, _ = _setup(tmp_path)
        assert again.next_id() == order_id + 1

    def test_corrupt_counter_file_falls_back_to_disk_scan(self, tmp_path):
        counter, store = _setup(tmp_path)
        (tmp_path / "orders" / "order_counter.txt").write_text("garbage")
        store.create(store.path_for(OrderState.READY), 4, "State: Ready\n")
        assert counter.next_id() == 5

    def test_concurrent_allocation_is_unique(self, tmp_path):
        counter, _ = _setup(tmp_path)
        ids: list[int] = []
        lock = threading.Lock()

        def allocate():
            for _ in range(25):
                value = counter.next_id()
                with lock:
                    ids.append(value)

        workers = [threading.Thread(target=allocate) for _ in range(4)]
        for w in workers:
            w.start()
        for w in workers:
            w.join()

        assert sorted(ids) == list(range(1, 101))
