"""HTTP client for the deployed test instance."""

from __future__ import annotations

import base64
import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from ...core.exceptions import DeploymentUnreachableError
from ...core.interfaces.logger import ILogger
from ..logging import get_logger


class DeployedInstanceClient:
    """
    Queries a running instance that has the plugin installed.

    Uses HTTP basic auth. Every failure (connection, HTTP status, body)
    surfaces as DeploymentUnreachableError.
    """

    def __init__(
        self,
        base_url: str,
        username: str = "admin",
        password: str = "admin",
        timeout: float = 30.0,
        logger: ILogger | None = None,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        token = base64.b64encode(f"{username}:{password}".encode()).decode()
        self._auth_header = f"Basic {token}"
        self._logger = logger or get_logger()

    def _get_json(self, path: str) -> dict[str, Any]:
        url = urllib.parse.urljoin(self.base_url, path)
        req = urllib.request.Request(url, method="GET")
        req.add_header("Authorization", self._auth_header)
        req.add_header("Accept", "application/json")

        self._logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read().decode()
        except urllib.error.HTTPError as e:
            raise DeploymentUnreachableError(
                f"HTTP {e.code} from deployed instance", url=url, status_code=e.code, cause=e
            ) from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise DeploymentUnreachableError(
                f"Connection error: {e}", url=url, cause=e
            ) from e

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            preview = body[:100].replace("\n", " ")
            raise DeploymentUnreachableError(
                f"Invalid JSON in response: '{preview}'", url=url, cause=e
            ) from e
        if not isinstance(data, dict):
            raise DeploymentUnreachableError("Expected a JSON object", url=url)
        return data

    def get_build_info(self) -> dict[str, Any]:
        """Return the instance's ``buildInfo`` from its frontend settings."""
        settings = self._get_json("api/frontend/settings")
        return settings.get("buildInfo") or {}

    def get_plugin_settings(self, plugin_id: str) -> dict[str, Any]:
        """Return the deployed plugin's settings, including its manifest ``info``."""
        return self._get_json(f"api/plugins/{urllib.parse.quote(plugin_id)}/settings")
