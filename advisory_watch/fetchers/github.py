"""GitHub repository security-advisory fetcher."""

import logging
from typing import List

import requests

from ..errors import FetchError, ParseError, TransportError
from ..models import Advisory

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
DEFAULT_REPO = "angular/angular"
DEFAULT_USER_AGENT = "Angular-Security-Monitor"
API_VERSION = "2022-11-28"


def advisories_url(repo: str) -> str:
    return f"{API_BASE}/repos/{repo.strip('/')}/security-advisories"


def fetch_advisories(
    repo: str = DEFAULT_REPO,
    timeout: float = 30,
    user_agent: str = DEFAULT_USER_AGENT,
) -> List[Advisory]:
    """
    Fetch the published security advisories of a repository.

    Args:
        repo: Repository in "owner/name" form
        timeout: Seconds to wait for the API before giving up
        user_agent: Value of the User-Agent header

    Returns:
        List of Advisory objects, in the order the API returned them

    Raises:
        TransportError: The request never got a response
        FetchError: The API answered with a status other than 200
        ParseError: The body was not a JSON array
    """
    url = advisories_url(repo)
    headers = {
        "User-Agent": user_agent,
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": API_VERSION,
    }
    logger.debug(f"Fetching security advisories for {repo} from {url}")

    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Request to {url} failed: {e}") from e

    if response.status_code != 200:
        raise FetchError(response.status_code, response.text)

    try:
        payload = response.json()
    except ValueError as e:
        raise ParseError(f"Failed to parse advisory response: {e}") from e

    if not isinstance(payload, list):
        raise ParseError(
            f"Expected a JSON array of advisories, got {type(payload).__name__}"
        )

    advisories = []
    for entry in payload:
        if not isinstance(entry, dict):
            logger.warning(f"Skipping malformed advisory entry: {entry!r}")
            continue
        try:
            advisories.append(Advisory.from_dict(entry))
        except ValueError as e:
            logger.warning(f"Skipping advisory entry: {e}")

    logger.info(f"Fetched {len(advisories)} advisories for {repo}")
    return advisories
