"""File-backed order ID counter.

On first use the counter starts from the larger of the highest ID found in
any state directory and the value last written to ``counter_file``.  The
counter file is rewritten on every allocation, so clearing ``collected/``
never causes an ID to be handed out twice.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from shophub.domain.exceptions import StorageError
from shophub.domain.model.order import OrderState
from shophub.domain.repository.order_id_generator import OrderIdGenerator
from shophub.domain.repository.order_store import OrderStore

logger = logging.getLogger(__name__)


class FileOrderCounter(OrderIdGenerator):

    def __init__(self, store: OrderStore, counter_file: Path) -> None:
        self._store = store
        self._counter_file = counter_file
        self._lock = threading.Lock()
        self._current: int | None = None

    def next_id(self) -> int:
        with self._lock:
            if self._current is None:
                self._current = self._initial_value()
            self._current += 1
            self._persist(self._current)
            return self._current

    # --- Internal helpers -----------------------------------------------------

    def _initial_value(self) -> int:
        highest_on_disk = 0
        for state in OrderState:
            ids = self._store.list_ids(self._store.path_for(state))
            if ids:
                highest_on_disk = max(highest_on_disk, ids[-1])
        persisted = self._read_persisted()
        start = max(highest_on_disk, persisted)
        logger.info(
            "Order counter starts at %d (disk=%d, counter file=%d)",
            start, highest_on_disk, persisted,
        )
        return start

    def _read_persisted(self) -> int:
        try:
            raw = self._counter_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return 0
        except OSError as exc:
            raise StorageError(f"Cannot read {self._counter_file}: {exc}") from exc
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring corrupt order counter file %s: %r", self._counter_file, raw)
            return 0

    def _persist(self, value: int) -> None:
        tmp = self._counter_file.with_name(self._counter_file.name + ".tmp")
        try:
            self._counter_file.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(f"{value}\n", encoding="utf-8")
            os.replace(tmp, self._counter_file)
        except OSError as exc:
            raise StorageError(f"Cannot write {self._counter_file}: {exc}") from exc
