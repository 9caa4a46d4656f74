"""Data-file transports: HTTP (httpx) or a local data directory.

Both expose the same two coroutines:

* ``exists(path)``     – metadata-only existence check
* ``fetch_json(path)`` – full body fetch, decoded as JSON

Paths are always relative to the transport's root, e.g.
``"iclr/iclr2024.json"``.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional, Protocol, Union

import httpx

DEFAULT_FETCH_TIMEOUT = 20.0


class TransportError(Exception):
    """Fetching a data file failed (missing, non-success status, bad JSON)."""

    def __init__(self, path: str, message: str, status: Optional[int] = None):
        self.path = path
        self.status = status
        super().__init__(message)


class Transport(Protocol):
    """What the probe and the session need from a transport."""

    async def exists(self, path: str) -> bool: ...

    async def fetch_json(self, path: str) -> Any: ...


class HttpTransport:
    """Transport for a data root served over HTTP(S)."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize HTTP transport.

        Args:
            base_url: Data root URL (``https://host/data``)
            timeout: Request timeout in seconds
            client: Pre-built client (tests pass one with a MockTransport)
        """
        self.base_url = base_url.rstrip("/") + "/"
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def url_for(self, path: str) -> str:
        return self.base_url + path.lstrip("/")

    async def exists(self, path: str) -> bool:
        """``HEAD`` the file; any 2xx means it exists.

        Transport errors propagate so the caller decides how to treat them.
        """
        response = await self._client.head(self.url_for(path))
        return response.is_success

    async def fetch_json(self, path: str) -> Any:
        """``GET`` the file and decode it as JSON.

        Raises:
            TransportError: On network errors, non-2xx status, or invalid JSON
        """
        url = self.url_for(path)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(path, f"request failed: {e}") from e
        if not response.is_success:
            raise TransportError(
                path,
                f"HTTP error! status: {response.status_code}",
                status=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(path, f"invalid JSON: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class FileTransport:
    """Transport for a data root on the local filesystem."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / path.lstrip("/")

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self._resolve(path).is_file)

    async def fetch_json(self, path: str) -> Any:
        """Read and decode a local JSON file.

        Raises:
            TransportError: If the file is missing, unreadable or not JSON
        """
        target = self._resolve(path)
        try:
            text = await asyncio.to_thread(target.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise TransportError(path, f"file not found: {target}", status=404) from e
        except OSError as e:
            raise TransportError(path, f"cannot read {target}: {e}") from e
        except UnicodeDecodeError as e:
            raise TransportError(path, f"cannot decode {target}: {e}") from e
        try:
            return json.loads(text)
        except ValueError as e:
            raise TransportError(path, f"invalid JSON: {e}") from e

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> "FileTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def make_transport(
    root: Union[str, Path],
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> Union[HttpTransport, FileTransport]:
    """Pick a transport for *root*: URL → HTTP, anything else → local dir."""
    root_str = str(root)
    if root_str.startswith(("http://", "https://")):
        return HttpTransport(root_str, timeout=timeout)
    return FileTransport(root)
