"""
Figma REST API 讀取

唯讀封裝：每個方法恰好發出一次 GET，失敗一律轉為 FetchError（不重試、不快取）。
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import ConfigurationError, FetchError, SchemaValidationError
from .schema import DesignFile, ProjectSummary, parse_file, parse_project, parse_team_projects

logger = logging.getLogger(__name__)

IMAGE_FORMATS = ("png", "jpg", "svg")


class FigmaAPIClient:
    """Figma REST API 唯讀封裝."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str, base_url: Optional[str] = None, timeout: Optional[float] = None):
        if not token:
            raise ConfigurationError("Figma access token is required")
        self.token = token
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def _get(self, path: str, what: str, params: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.HTTPError as e:
            status = getattr(e.response, "status_code", None)
            raise FetchError(f"Failed to fetch {what}: {e}", status_code=status) from e
        except requests.RequestException as e:
            # JSONDecodeError 在 requests 2.27+ 也是 RequestException 子類別
            raise FetchError(f"Failed to fetch {what}: {e}") from e
        except ValueError as e:
            raise FetchError(f"Failed to fetch {what}: invalid JSON response ({e})") from e

    @staticmethod
    def _require(value: str, name: str) -> None:
        if not value or not str(value).strip():
            raise ValueError(f"{name} must not be empty")

    def get_file(self, file_key: str) -> DesignFile:
        self._require(file_key, "file_key")
        data = self._get(f"/files/{file_key}", "Figma file")
        try:
            return parse_file(data)
        except SchemaValidationError as e:
            raise FetchError(f"Failed to fetch Figma file: {e}") from e

    def get_project(self, project_id: str) -> ProjectSummary:
        self._require(project_id, "project_id")
        data = self._get(f"/projects/{project_id}", "Figma project")
        try:
            return parse_project(data)
        except SchemaValidationError as e:
            raise FetchError(f"Failed to fetch Figma project: {e}") from e

    def get_team_projects(self, team_id: str) -> List[ProjectSummary]:
        self._require(team_id, "team_id")
        data = self._get(f"/teams/{team_id}/projects", "team projects")
        try:
            return parse_team_projects(data).projects
        except SchemaValidationError as e:
            raise FetchError(f"Failed to fetch team projects: {e}") from e

    def get_images(self, file_key: str, node_ids: list, format: str = "png", scale: float = 1) -> Dict[str, Optional[str]]:
        """回傳 { nodeId: imageUrl }；Figma 無法算繪的節點值為 None."""
        self._require(file_key, "file_key")
        if not node_ids:
            raise ValueError("node_ids must not be empty")
        if format not in IMAGE_FORMATS:
            raise ValueError(f"format must be one of {', '.join(IMAGE_FORMATS)}, got '{format}'")
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        params = {"ids": ",".join(node_ids), "format": format, "scale": scale}
        data = self._get(f"/images/{file_key}", "file images", params=params)
        if not isinstance(data, dict):
            raise FetchError("Failed to fetch file images: expected a JSON object")
        return data.get("images") or {}

    def get_comments(self, file_key: str) -> List[dict]:
        self._require(file_key, "file_key")
        data = self._get(f"/files/{file_key}/comments", "file comments")
        if not isinstance(data, dict):
            raise FetchError("Failed to fetch file comments: expected a JSON object")
        return data.get("comments") or []
