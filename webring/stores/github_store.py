# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Store: JSON documents as files in a GitHub repository (REST contents API).

The blob ``sha`` is the revision token. Updates must carry the sha of the
version being replaced; GitHub rejects stale or missing ones, which surfaces
here as ``Conflict``. Every write is a commit whose message is the change
description.
"""

import base64
import json
from typing import Any, Optional

import httpx

from webring.core.errors import Conflict, StoreUnavailable
from webring.core.logging import get_logger
from webring.metrics.prometheus import STORE_OPERATIONS
from webring.stores.base import ABSENT, StoredDocument

logger = get_logger(__name__)

_CONFLICT_STATUSES = (409, 422)


class GitHubContentsStore:
    """Reads and writes files on one branch of one repository."""

    name = "github"

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        branch: str = "main",
        api_url: str = "https://api.github.com",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._owner = owner
        self._repo = repo
        self._branch = branch
        self._client = client or httpx.Client(
            base_url=api_url,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    def _contents_path(self, document: str) -> str:
        return f"/repos/{self._owner}/{self._repo}/contents/{document}"

    def _count(self, operation: str, outcome: str) -> None:
        STORE_OPERATIONS.labels(store=self.name, operation=operation, outcome=outcome).inc()

    # ── Read ──

    def read(self, document: str) -> StoredDocument:
        try:
            resp = self._client.get(
                self._contents_path(document), params={"ref": self._branch}
            )
        except httpx.HTTPError as exc:
            self._count("read", "error")
            raise StoreUnavailable(f"GitHub unreachable reading {document}: {exc}") from exc

        if resp.status_code == 404:
            self._count("read", "absent")
            return ABSENT
        if resp.status_code != 200:
            self._count("read", "error")
            raise StoreUnavailable(
                f"GitHub returned {resp.status_code} reading {document}"
            )

        try:
            payload = resp.json()
            raw = base64.b64decode(payload["content"]).decode("utf-8")
            content = json.loads(raw)
            sha = payload["sha"]
        except (KeyError, TypeError, ValueError) as exc:
            self._count("read", "error")
            raise StoreUnavailable(f"Undecodable GitHub payload for {document}: {exc}") from exc

        self._count("read", "ok")
        return StoredDocument(content, sha)

    # ── Write ──

    def write(
        self,
        document: str,
        content: dict[str, Any],
        revision: Optional[str],
        message: str,
    ) -> Optional[str]:
        encoded = base64.b64encode(
            json.dumps(content, indent=2).encode("utf-8")
        ).decode("ascii")
        body: dict[str, Any] = {
            "message": message,
            "content": encoded,
            "branch": self._branch,
        }
        if revision:
            body["sha"] = revision

        try:
            resp = self._client.put(self._contents_path(document), json=body)
        except httpx.HTTPError as exc:
            self._count("write", "error")
            raise StoreUnavailable(f"GitHub unreachable writing {document}: {exc}") from exc

        if resp.status_code in _CONFLICT_STATUSES:
            self._count("write", "conflict")
            logger.warning(
                "Revision conflict writing %s (sha=%s, status=%d)",
                document, revision, resp.status_code,
            )
            raise Conflict(f"{document} was changed concurrently; reload and retry")
        if resp.status_code not in (200, 201):
            self._count("write", "error")
            raise StoreUnavailable(
                f"GitHub returned {resp.status_code} writing {document}"
            )

        try:
            new_sha = (resp.json().get("content") or {}).get("sha")
        except ValueError as exc:
            self._count("write", "error")
            raise StoreUnavailable(f"Undecodable GitHub response writing {document}: {exc}") from exc
        self._count("write", "ok")
        logger.info("Committed %s: %s", document, message)
        return new_sha

    def close(self) -> None:
        self._client.close()
