# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Store: JSON documents on local disk.
No revision tokens, every write overwrites. Concurrent writers can lose
updates; there is nothing here to detect it.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from webring.core.errors import StoreUnavailable
from webring.core.logging import get_logger
from webring.metrics.prometheus import STORE_OPERATIONS
from webring.stores.base import ABSENT, StoredDocument

logger = get_logger(__name__)


class LocalFileStore:
    """Reads and writes ``<data_dir>/<document>``."""

    name = "local"

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path(self, document: str) -> Path:
        return self._data_dir / document

    def read(self, document: str) -> StoredDocument:
        path = self._path(document)
        if not path.is_file():
            STORE_OPERATIONS.labels(store=self.name, operation="read", outcome="absent").inc()
            return ABSENT
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            STORE_OPERATIONS.labels(store=self.name, operation="read", outcome="error").inc()
            raise StoreUnavailable(f"Cannot read {document}: {exc}") from exc
        STORE_OPERATIONS.labels(store=self.name, operation="read", outcome="ok").inc()
        return StoredDocument(content, None)

    def write(
        self,
        document: str,
        content: dict[str, Any],
        revision: Optional[str],
        message: str,
    ) -> Optional[str]:
        path = self._path(document)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(content, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            STORE_OPERATIONS.labels(store=self.name, operation="write", outcome="error").inc()
            raise StoreUnavailable(f"Cannot write {document}: {exc}") from exc
        STORE_OPERATIONS.labels(store=self.name, operation="write", outcome="ok").inc()
        logger.debug("Wrote %s (%s)", path, message)
        return None
