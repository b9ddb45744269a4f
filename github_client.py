import logging
from typing import List
from urllib.parse import quote

import requests

from errors import NotFound
from settings import Settings

log = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


class GitHubClient:
    """Lists a GitHub user's public repositories."""

    def __init__(self, settings: Settings, timeout: float = 10.0):
        self.timeout = timeout
        self.auth = None
        if settings.github_client_id and settings.github_secret:
            self.auth = (settings.github_client_id, settings.github_secret)

    def list_repos(self, username: str, count: int = 5) -> List[dict]:
        try:
            res = requests.get(
                f"{GITHUB_API}/users/{quote(username, safe='')}/repos",
                params={"per_page": count, "sort": "created", "direction": "asc"},
                headers={"User-Agent": "devconnector", "Accept": "application/vnd.github+json"},
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.RequestException as ex:
            log.warning("GitHub request for %s failed: %s", username, ex)
            raise NotFound("No Github profile found") from ex

        if res.status_code != 200:
            log.warning("GitHub answered %s for %s", res.status_code, username)
            raise NotFound("No Github profile found")
        return res.json()
