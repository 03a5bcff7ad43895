# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Store contract: uniform get/put of a named JSON document.

A store owns nothing but the durable document. Revision tokens are opaque;
stores that do not version documents return ``None`` for them.
"""

from typing import Any, NamedTuple, Optional, Protocol


class StoredDocument(NamedTuple):
    content: Optional[dict[str, Any]]
    revision: Optional[str]


ABSENT = StoredDocument(None, None)


class DocumentStore(Protocol):
    name: str

    def read(self, document: str) -> StoredDocument:
        """Return the document and its revision; ``ABSENT`` if it does not exist."""
        ...

    def write(
        self,
        document: str,
        content: dict[str, Any],
        revision: Optional[str],
        message: str,
    ) -> Optional[str]:
        """Create or replace the document; return the new revision, if any."""
        ...
