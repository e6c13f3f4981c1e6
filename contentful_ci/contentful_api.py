"""
Script: contentful_ci/contentful_api.py
What: Minimal client for the Contentful Content Management API (CMA).
Doing: Fetches a space, its environments, and its memberships over HTTPS with `requests`.
Why: The workflow only needs three read calls, so a full SDK is not worth pulling in.
Goal: Turn CMA responses into plain dicts and CMA failures into one readable error type.
"""

from __future__ import annotations

from typing import Any, Optional

import requests

from contentful_ci.common import CiToolError


DEFAULT_BASE_URL = "https://api.contentful.com"
DEFAULT_TIMEOUT = 30.0
PAGE_LIMIT = 100
CMA_CONTENT_TYPE = "application/vnd.contentful.management.v1+json"


class ContentfulApiError(CiToolError):
    """Raised when a CMA request fails or cannot be sent."""

    def __init__(self, message: str, status: Optional[int] = None, status_text: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.status_text = status_text


def _error_from_response(response: requests.Response) -> ContentfulApiError:
    # CMA error bodies look like {"sys": {"id": "AccessTokenInvalid"}, "message": "..."}.
    message = ""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = str(body.get("message") or "")
    status_text = response.reason or ""
    if not message:
        message = f"Request to {response.url} failed"
    return ContentfulApiError(message, status=response.status_code, status_text=status_text)


class ContentfulClient:
    """Read-only CMA client authenticated with a management token."""

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {access_token}",
                "Content-Type": CMA_CONTENT_TYPE,
            }
        )

    def __enter__(self) -> ContentfulClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ContentfulApiError(f"Request to {url} failed: {exc}") from exc

        if not response.ok:
            raise _error_from_response(response)
        try:
            return response.json()
        except ValueError as exc:
            raise ContentfulApiError(
                f"Expected JSON from {url}",
                status=response.status_code,
                status_text=response.reason or "",
            ) from exc

    def _get_collection(self, path: str) -> list[dict]:
        """
        Read every item of a CMA collection.

        Collections are paged with `skip`/`limit`; the response `total` tells us
        when to stop.
        """
        items: list[dict] = []
        skip = 0
        while True:
            page = self._get(path, params={"skip": skip, "limit": PAGE_LIMIT})
            page_items = page.get("items") or []
            items.extend(page_items)
            skip += len(page_items)
            total = int(page.get("total") or 0)
            if not page_items or skip >= total:
                return items

    def get_space(self, space_id: str) -> dict:
        return self._get(f"/spaces/{space_id}")

    def get_environments(self, space_id: str) -> list[dict]:
        return self._get_collection(f"/spaces/{space_id}/environments")

    def get_space_memberships(self, space_id: str) -> list[dict]:
        return self._get_collection(f"/spaces/{space_id}/space_memberships")
