# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Backing stores. The variant is chosen once, here, from settings.
"""

from webring.core.errors import Misconfigured
from webring.core.logging import get_logger
from webring.stores.base import ABSENT, DocumentStore, StoredDocument
from webring.stores.github_store import GitHubContentsStore
from webring.stores.local_store import LocalFileStore

logger = get_logger(__name__)

__all__ = [
    "ABSENT",
    "DocumentStore",
    "GitHubContentsStore",
    "LocalFileStore",
    "StoredDocument",
    "build_store",
]


def build_store(settings) -> DocumentStore:
    """Construct the store selected by ``USE_LOCAL_DATA``.

    Raises Misconfigured when the GitHub store lacks its token or location.
    """
    if settings.USE_LOCAL_DATA:
        logger.info("Using local data storage at %s", settings.DATA_DIR)
        return LocalFileStore(settings.DATA_DIR)

    missing = [
        var
        for var, value in (
            ("GITHUB_TOKEN", settings.GITHUB_TOKEN),
            ("GITHUB_OWNER", settings.GITHUB_OWNER),
            ("GITHUB_REPO", settings.GITHUB_REPO),
        )
        if not value
    ]
    if missing:
        raise Misconfigured(
            f"{', '.join(missing)} required when USE_LOCAL_DATA is false"
        )
    logger.info(
        "Using GitHub data storage: %s/%s@%s",
        settings.GITHUB_OWNER, settings.GITHUB_REPO, settings.GITHUB_BRANCH,
    )
    return GitHubContentsStore(
        owner=settings.GITHUB_OWNER,
        repo=settings.GITHUB_REPO,
        token=settings.GITHUB_TOKEN,
        branch=settings.GITHUB_BRANCH,
        api_url=settings.GITHUB_API_URL,
        timeout=settings.GITHUB_TIMEOUT,
    )
