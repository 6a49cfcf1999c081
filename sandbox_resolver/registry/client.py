"""Registry clients for fetching component records by identifier."""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from typing import Protocol
from typing import runtime_checkable

import httpx
from pydantic import ValidationError

from ..lib.resolution.models import ComponentRecord

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """A component could not be fetched because the registry failed.

    Raised for transport and format failures. A component that simply does
    not exist is not an error - ``fetch`` returns None for it.
    """

    def __init__(self, identifier: str, message: str):
        super().__init__(f"{identifier}: {message}")
        self.identifier = identifier


@runtime_checkable
class RegistryClient(Protocol):
    """Protocol for keyed component lookup."""

    async def fetch(self, identifier: str) -> ComponentRecord | None:
        """Fetch a component record, or None if the registry has no such component."""
        ...


class BaseRegistryClient(ABC):
    """Shared caching for registry clients.

    Records (and misses) are cached per client instance. Subclasses implement
    ``_load`` returning the raw record dict or None.
    """

    def __init__(self) -> None:
        self._cache: dict[str, ComponentRecord | None] = {}

    async def fetch(self, identifier: str) -> ComponentRecord | None:
        """Fetch a component record with caching.

        Args:
            identifier: Registry key of the component

        Returns:
            ComponentRecord, or None if not found

        Raises:
            RegistryError: If the underlying store fails or returns an invalid record
        """
        if identifier in self._cache:
            logger.debug(f"Using cached registry record: {identifier}")
            return self._cache[identifier]

        data = await self._load(identifier)
        record = None if data is None else self._parse(identifier, data)
        self._cache[identifier] = record
        return record

    @abstractmethod
    async def _load(self, identifier: str) -> Any:
        """Return the raw record for identifier, or None if it does not exist."""

    @staticmethod
    def _parse(identifier: str, data: Any) -> ComponentRecord:
        if isinstance(data, ComponentRecord):
            return data
        if not isinstance(data, dict):
            raise RegistryError(identifier, f"expected a JSON object, got {type(data).__name__}")
        try:
            return ComponentRecord.model_validate({"name": identifier, **data})
        except ValidationError as e:
            raise RegistryError(identifier, f"invalid component record: {e}") from e

    def clear_cache(self) -> None:
        """Forget all cached records."""
        self._cache.clear()


class StaticRegistryClient(BaseRegistryClient):
    """Registry backed by an in-memory mapping of identifier to record."""

    def __init__(self, records: Mapping[str, ComponentRecord | dict[str, Any]]):
        super().__init__()
        self.records = dict(records)

    async def _load(self, identifier: str) -> Any:
        return self.records.get(identifier)

    def __repr__(self) -> str:
        return f"StaticRegistryClient({len(self.records)} records)"


class DirectoryRegistryClient(BaseRegistryClient):
    """Registry backed by ``<root>/<identifier>.json`` files."""

    def __init__(self, root: str | Path):
        """Initialize with registry directory.

        Args:
            root: Directory containing one JSON record per component
        """
        super().__init__()
        self.root = Path(root).expanduser().resolve()

    async def _load(self, identifier: str) -> Any:
        # Security: Prevent path traversal
        if ".." in identifier or identifier.startswith("/"):
            logger.warning(f"Path traversal attempt blocked: {identifier}")
            return None

        record_path = self.root / f"{identifier}.json"
        return await asyncio.to_thread(self._read, identifier, record_path)

    @staticmethod
    def _read(identifier: str, record_path: Path) -> Any:
        if not record_path.is_file():
            logger.debug(f"Registry record not found: {record_path}")
            return None
        try:
            return json.loads(record_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise RegistryError(identifier, f"cannot read {record_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise RegistryError(identifier, f"invalid JSON in {record_path}: {e}") from e

    def list_identifiers(self) -> list[str]:
        """List identifiers of all records in the directory."""
        if not self.root.is_dir():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))

    def __repr__(self) -> str:
        return f"DirectoryRegistryClient({self.root})"


class HttpRegistryClient(BaseRegistryClient):
    """Registry served over HTTP as ``<base_url>/<identifier>.json``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP registry client.

        Args:
            base_url: URL of the directory holding component records
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used for testing)
        """
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _load(self, identifier: str) -> Any:
        url = f"{self.base_url}/{identifier}.json"
        logger.debug(f"Fetching registry record from {url}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            raise RegistryError(identifier, f"failed to fetch {url}: {e!r}") from e
        except ValueError as e:
            raise RegistryError(identifier, f"invalid JSON from {url}: {e}") from e

    def __repr__(self) -> str:
        return f"HttpRegistryClient({self.base_url})"


def create_registry_client(location: str | Path) -> BaseRegistryClient:
    """Create a registry client for a directory path or an http(s) URL."""
    location_str = str(location)
    if location_str.startswith(("http://", "https://")):
        return HttpRegistryClient(location_str)
    return DirectoryRegistryClient(location_str)
