"""Strapi REST client for blog posts and categories."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict

import requests  # type: ignore[import-untyped]
from loguru import logger

DEFAULT_RETRIES = 3
BACKOFF_SECONDS = [0.5, 1.0, 2.0]
RETRY_STATUSES = {429, 500, 502, 503, 504}
PAGE_SIZE = 100


class StrapiError(Exception):
    """Raised when a Strapi request fails."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass
class RateLimiter:
    delay_seconds: float
    last_request_ts: float = field(default=0.0)

    def wait(self) -> None:
        elapsed = time.time() - self.last_request_ts
        if elapsed < self.delay_seconds:
            time.sleep(self.delay_seconds - elapsed)

    def mark(self) -> None:
        self.last_request_ts = time.time()


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return str(error or body)[:200]


class StrapiClient:
    """Thin client over the Strapi v5 REST API with retries and a request delay."""

    def __init__(
        self,
        base_url: str,
        api_token: str,
        *,
        delay_seconds: float = 0.1,
        timeout_s: float = 20.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers.update(
            {"Content-Type": "application/json", "Authorization": f"Bearer {api_token}"}
        )
        self.limiter = RateLimiter(delay_seconds=delay_seconds)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """Send a request, retrying on network errors and 429/5xx."""
        url = f"{self.base_url}{path}"
        for attempt in range(DEFAULT_RETRIES):
            self.limiter.wait()
            delay = BACKOFF_SECONDS[min(attempt, len(BACKOFF_SECONDS) - 1)]
            try:
                resp = self.session.request(
                    method, url, params=params, json=json, timeout=self.timeout_s
                )
                self.limiter.mark()
            except requests.RequestException as exc:  # network / timeout
                if attempt == DEFAULT_RETRIES - 1:
                    raise StrapiError(f"{method} {path} failed: {exc}") from exc
                logger.warning(f"{method} {path}: {exc}, retrying in {delay}s")
                time.sleep(delay)
                continue

            if resp.status_code in RETRY_STATUSES and attempt < DEFAULT_RETRIES - 1:
                logger.warning(f"{method} {path}: HTTP {resp.status_code}, retrying in {delay}s")
                time.sleep(delay)
                continue
            if resp.status_code >= 400:
                message = _error_message(resp)
                logger.error(f"{method} {path}: HTTP {resp.status_code}: {message}")
                raise StrapiError(message, status=resp.status_code)
            if not resp.content:
                return {}
            try:
                return resp.json()
            except ValueError:
                return {"raw": resp.text}
        # unreachable: the last attempt returns or raises above
        raise StrapiError(f"{method} {path} failed after {DEFAULT_RETRIES} attempts")

    def list_categories(self) -> Dict[str, str]:
        """Return a mapping of category slug to documentId."""
        body = self.request("GET", "/api/categories", params={"pagination[pageSize]": PAGE_SIZE})
        return {
            str(item["slug"]): str(item["documentId"])
            for item in body.get("data", []) or []
            if item.get("slug") and item.get("documentId")
        }

    def find_post(self, slug: str) -> Dict[str, Any] | None:
        body = self.request("GET", "/api/blog-posts", params={"filters[slug][$eq]": slug})
        items = body.get("data", []) or []
        return items[0] if items else None

    def create_post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", "/api/blog-posts", json=payload)

    def update_post(self, document_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PUT", f"/api/blog-posts/{document_id}", json=payload)
