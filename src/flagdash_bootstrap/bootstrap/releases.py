"""Release tag resolution against the GitHub releases API."""

from __future__ import annotations

import json
from typing import Optional

from flagdash_bootstrap.bootstrap.download import Fetcher
from flagdash_bootstrap.core.errors import HttpError, NetworkError, NoReleaseFoundError
from flagdash_bootstrap.core.logging import get_logger

LOGGER = get_logger(__name__)

GITHUB_API_ACCEPT = "application/vnd.github+json"


def latest_release_url(api_host: str, repo: str) -> str:
    """URL of the latest-release metadata document for ``repo``."""
    return f"https://{api_host}/repos/{repo}/releases/latest"


class ReleaseLocator:
    """Finds the release tag to install."""

    def __init__(self, fetcher: Fetcher, api_host: str = "api.github.com") -> None:
        self._fetcher = fetcher
        self._api_host = api_host

    def resolve(self, repo: str, pinned: Optional[str] = None) -> str:
        """Return the pinned version verbatim, or query the latest one.

        A pinned version is not checked against the release feed; a missing
        release shows up later as a 404 on the artifact download.
        """
        if pinned:
            LOGGER.debug(f"Using pinned version {pinned}")
            return pinned
        return self.latest_version(repo)

    def latest_version(self, repo: str) -> str:
        """Query the releases API for the latest published tag.

        Args:
            repo: Repository identity, ``owner/name``.

        Returns:
            The ``tag_name`` of the latest release.

        Raises:
            NoReleaseFoundError: If the repo has no releases, or the response
                is not a JSON object with a non-empty string ``tag_name``.
            NetworkError: On transport failures and non-2xx responses other
                than 404.
        """
        url = latest_release_url(self._api_host, repo)
        LOGGER.debug(f"Querying latest release from {url}")

        try:
            body = self._fetcher.get(url, accept=GITHUB_API_ACCEPT)
        except HttpError as e:
            # The API answers 404 when a repository has no published releases
            if e.status == 404:
                raise NoReleaseFoundError(repo, f"no published releases ({url})") from e
            raise NetworkError(e.url, f"HTTP {e.status}") from e

        return parse_release_tag(body, repo)


def parse_release_tag(body: bytes, repo: str) -> str:
    """Extract ``tag_name`` from a release metadata document.

    Raises:
        NoReleaseFoundError: If the document is malformed or has no tag.
    """
    if not body.strip():
        raise NoReleaseFoundError(repo, "empty release metadata response")

    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise NoReleaseFoundError(repo, f"malformed release metadata: {e}") from e

    if not isinstance(data, dict):
        raise NoReleaseFoundError(
            repo, f"release metadata must be an object, got {type(data).__name__}"
        )

    tag = data.get("tag_name")
    if not isinstance(tag, str) or not tag.strip():
        raise NoReleaseFoundError(repo, "release metadata has no tag_name")

    LOGGER.debug(f"Latest release of {repo} is {tag}")
    return tag.strip()
