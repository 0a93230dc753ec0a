"""HTTP client for the group administration gateway.

Each method maps to one gateway endpoint and returns parsed values or
raises :class:`GatewayError` with a message fit for display.  Non-2xx
responses, transport failures and payloads that do not parse as groups or
posts are all reported the same way; callers do not retry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from group_admin.config import settings
from group_admin.modules.groups.schemas import Group
from group_admin.modules.posts.schemas import Post

logger = logging.getLogger(__name__)

GROUPS_PATH = "/api/datatwo/datatwo"
ADD_MEMBER_PATH = "/api/addmember/addmember"
ADD_PERMISSION_PATH = "/api/permcloud/permcloud"
DELETE_USER_PATH = "/api/deletemember/deletemember"
DELETE_MEMBER_PATH = "/api/deletemember2/deletemember2"
MEMBER_POSTS_PATH = "/api/getmemberposts/getmemberposts"

_groups_adapter = TypeAdapter(List[Group])
_posts_adapter = TypeAdapter(List[Post])


class GatewayError(Exception):
    """A gateway call failed; ``message`` is what the panel shows."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GatewayClient:
    """Thin wrapper over the gateway endpoints.

    Args:
        base_url: Gateway root, e.g. ``http://localhost:8000``.  Defaults
            to ``settings.api_base_url``.
        http: Optional pre-built ``httpx.Client`` (a FastAPI ``TestClient``
            works too).  When given, ``base_url`` is ignored.
    """

    def __init__(self, base_url: Optional[str] = None, http: Optional[httpx.Client] = None) -> None:
        self._owns_http = http is None
        self.http = http or httpx.Client(
            base_url=(base_url or settings.api_base_url).rstrip("/"),
            timeout=None,
        )

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Reads

    def fetch_groups(self) -> List[Group]:
        payload = self._request("GET", GROUPS_PATH, failure="Failed to fetch groups")
        try:
            return _groups_adapter.validate_python(payload)
        except ValidationError as exc:
            logger.error(f"Malformed group payload: {exc}")
            raise GatewayError("Failed to fetch groups: malformed response") from exc

    def fetch_member_posts(self, member: str) -> List[Post]:
        payload = self._request(
            "GET",
            MEMBER_POSTS_PATH,
            params={"member": member},
            failure="Failed to fetch posts",
        )
        try:
            return _posts_adapter.validate_python(payload)
        except ValidationError as exc:
            logger.error(f"Malformed posts payload for {member}: {exc}")
            raise GatewayError("Failed to fetch posts: malformed response") from exc

    # Writes

    def add_member(self, group_id: str, new_member: str) -> str:
        return self._write(ADD_MEMBER_PATH, {"groupId": group_id, "newMember": new_member}, "Failed to add member")

    def add_permission(self, group_id: str, member: str) -> str:
        return self._write(ADD_PERMISSION_PATH, {"groupId": group_id, "member": member}, "Failed to add permission")

    def delete_user(self, group_id: str, user: str) -> str:
        return self._write(DELETE_USER_PATH, {"groupId": group_id, "user": user}, "Failed to delete user")

    def delete_member(self, group_id: str, member: str) -> str:
        return self._write(DELETE_MEMBER_PATH, {"groupId": group_id, "member": member}, "Failed to delete member")

    def _write(self, path: str, body: Dict[str, Any], failure: str) -> str:
        payload = self._request("POST", path, json=body, failure=failure)
        if isinstance(payload, dict):
            return str(payload.get("message", ""))
        return ""

    def _request(self, method: str, path: str, *, failure: str, **kwargs: Any) -> Any:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"{method} {path} failed: {exc}")
            raise GatewayError(failure) from exc
        if not response.is_success:
            message = _error_details(response) or failure
            logger.error(f"{method} {path} returned {response.status_code}: {message}")
            raise GatewayError(message, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError(f"{failure}: malformed response", status_code=response.status_code) from exc


def _error_details(response: httpx.Response) -> Optional[str]:
    """The ``details`` (or ``error``) field of a failure envelope, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("details", "error", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None
