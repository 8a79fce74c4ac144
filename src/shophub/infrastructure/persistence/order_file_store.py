"""Filesystem implementation of OrderStore.

One ``<id>.txt`` file per order, kept in the directory that matches its
state::

    orders/ordered/  orders/progressing/  orders/ready/  orders/collected/
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from shophub.domain.exceptions import (
    AlreadyExistsError,
    EntityNotFoundError,
    StorageError,
)
from shophub.domain.model.order import OrderState, state_header
from shophub.domain.repository.order_store import OrderStore

logger = logging.getLogger(__name__)

STATE_DIRECTORIES: dict[OrderState, str] = {
    OrderState.ORDERED: "ordered",
    OrderState.PROGRESSING: "progressing",
    OrderState.READY: "ready",
    OrderState.COLLECTED: "collected",
}

_SUFFIX = ".txt"


class FileOrderStore(OrderStore):

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def ensure_directories(self) -> None:
        try:
            for state in OrderState:
                self.path_for(state).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create order directories under {self._root}: {exc}") from exc

    # --- OrderStore interface -------------------------------------------------

    def path_for(self, state: OrderState) -> Path:
        return self._root / STATE_DIRECTORIES[state]

    def create(self, directory: Path, order_id: int, body: str) -> None:
        path = self._file(directory, order_id)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with path.open("x", encoding="utf-8") as fh:
                fh.write(body)
        except FileExistsError as exc:
            raise AlreadyExistsError(f"Order file {path} already exists") from exc
        except OSError as exc:
            raise StorageError(f"Cannot write order file {path}: {exc}") from exc

    def read(self, directory: Path, order_id: int) -> str:
        path = self._file(directory, order_id)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise EntityNotFoundError(f"Order file {path} not found") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read order file {path}: {exc}") from exc

    def update_and_move(
        self,
        order_id: int,
        new_state: OrderState,
        source_dir: Path,
        target_dir: Path,
    ) -> None:
        """Rewrite the header in place, then rename into the target directory.

        Both steps are atomic renames, so at any instant exactly one file
        with this id exists.  A crash between them leaves the file in the
        source directory with the new header.
        """
        source = self._file(source_dir, order_id)
        target = self._file(target_dir, order_id)
        if not source.is_file():
            raise EntityNotFoundError(f"Order file {source} not found")
        if target.exists():
            raise AlreadyExistsError(f"Order file {target} already exists")

        tmp = source_dir / f".{order_id}{_SUFFIX}.tmp"
        try:
            body = source.read_text(encoding="utf-8")
            _, _, rest = body.partition("\n")
            tmp.write_text(f"{state_header(new_state)}\n{rest}", encoding="utf-8")
            os.replace(tmp, source)
            target_dir.mkdir(parents=True, exist_ok=True)
            os.replace(source, target)
        except (OSError, UnicodeDecodeError) as exc:
            tmp.unlink(missing_ok=True)
            raise StorageError(
                f"Cannot move order {order_id} from {source_dir} to {target_dir}: {exc}"
            ) from exc

    def list_ids(self, directory: Path) -> list[int]:
        if not directory.is_dir():
            logger.info("%s does not exist", directory)
            return []

        ids: list[int] = []
        try:
            entries = list(directory.iterdir())
        except OSError as exc:
            raise StorageError(f"Cannot list {directory}: {exc}") from exc
        for entry in entries:
            if not entry.is_file() or entry.suffix != _SUFFIX:
                continue
            # Only canonical names, so that <id>.txt names this very file.
            stem = entry.stem
            if stem.isdecimal() and stem.isascii() and str(int(stem)) == stem:
                ids.append(int(stem))
            else:
                logger.warning("Skipping invalid order file name: %s", entry.name)
        return sorted(ids)

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _file(directory: Path, order_id: int) -> Path:
        return directory / f"{order_id}{_SUFFIX}"
