"""HTTP client for the Ragwalla REST API."""

from typing import Any

import httpx

from .. import __version__
from ..config import DEFAULT_TIMEOUT, resolve_base_url
from ..errors import RagwallaAPIError
from ..logging_config import get_logger

logger = get_logger(__name__)


class HTTPClient:
    """Thin async wrapper over httpx with Ragwalla auth and error mapping."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = resolve_base_url(base_url)
        self._debug = debug
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "User-Agent": f"ragwalla-agents-sdk-python/{__version__}",
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path``; ``None`` params are dropped."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        return await self._request("GET", path, params=params or None)

    async def post(self, path: str, data: dict[str, Any] | None = None) -> Any:
        return await self._request("POST", path, json=data)

    async def put(self, path: str, data: dict[str, Any] | None = None) -> Any:
        return await self._request("PUT", path, json=data)

    async def delete(self, path: str, data: dict[str, Any] | None = None) -> Any:
        return await self._request("DELETE", path, json=data)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        if self._debug:
            logger.info("Making %s request to %s", method, path)

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise

        if self._debug:
            logger.info(
                "%s %s completed with status %s",
                method,
                path,
                response.status_code,
            )

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            # Errors are wrapped as {"error": {message, type, code, param}}
            error = body.get("error") if isinstance(body, dict) else None
            if not isinstance(error, dict):
                error = body if isinstance(body, dict) else {}
            raise RagwallaAPIError(
                error.get("message") or f"HTTP {response.status_code}",
                status=response.status_code,
                type=error.get("type"),
                code=error.get("code"),
                param=error.get("param"),
            )

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            return response.json()
        return response.text
