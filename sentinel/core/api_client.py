from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from sentinel.config.settings import Settings, settings as default_settings
from sentinel.core.logger import get_logger

logger = get_logger(__name__)


class ApiResponseError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None, content_type: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.content_type = content_type


@dataclass(slots=True)
class ApiResponse:
    """Decoded response handed to test cases and the fixture pool."""

    status: int
    data: Any
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def create_http_client(
    config: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    cfg = config or default_settings
    timeout = httpx.Timeout(cfg.request_timeout_sec, connect=cfg.request_timeout_sec)
    return httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)


def _clean_params(params: dict[str, Any] | None) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple)):
            cleaned[key] = ",".join(str(item) for item in value)
        elif isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


class ApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` that adds base URL, auth header and logging."""

    def __init__(self, client: httpx.AsyncClient, config: Settings | None = None) -> None:
        self.client = client
        self.config = config or default_settings

    def build_url(self, endpoint: str, params: dict[str, Any] | None = None) -> str:
        if endpoint.startswith(("http://", "https://")):
            base = endpoint
        else:
            base = f"{self.config.api_base_url}/{endpoint.lstrip('/')}"
        cleaned = _clean_params(params)
        if not cleaned:
            return base
        return str(httpx.URL(base).copy_merge_params(cleaned))

    def build_headers(self, custom: dict[str, str] | None = None, use_auth: bool = True) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(custom or {}),
        }
        if use_auth and self.config.API_TOKEN:
            headers[self.config.X_API_TOKEN_HEADER] = self.config.API_TOKEN
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
        use_auth: bool = True,
    ) -> httpx.Response:
        url = self.build_url(endpoint, params)
        request_headers = self.build_headers(headers, use_auth)
        logger.debug("api.request", method=method, url=url)
        try:
            response = await self.client.request(method, url, headers=request_headers, json=json)
        except httpx.HTTPError as exc:
            logger.error("api.request_failed", method=method, url=url, error=str(exc))
            raise
        logger.debug(
            "api.response",
            method=method,
            url=url,
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
        )
        return response

    async def get(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", endpoint, **kwargs)

    def validate_and_extract_json(self, response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise ApiResponseError(
                f"Expected a JSON response, got: {content_type or 'no content type'}",
                status_code=response.status_code,
                content_type=content_type,
            )
        try:
            return response.json()
        except ValueError as exc:
            logger.error("api.invalid_json", status_code=response.status_code, error=str(exc))
            raise ApiResponseError(
                "Invalid JSON response body",
                status_code=response.status_code,
                content_type=content_type,
            ) from exc

    def decode(self, response: httpx.Response) -> ApiResponse:
        return ApiResponse(
            status=response.status_code,
            data=self.validate_and_extract_json(response),
            headers=dict(response.headers),
        )

    @staticmethod
    def is_success_response(response: httpx.Response) -> bool:
        return 200 <= response.status_code < 300
