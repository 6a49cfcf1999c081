"""Breadth-first resolution of component reference graphs.

A session starts from one or more pieces of seed text, discovers every
registry component they reference (directly or transitively), fetches each
component once, and accumulates rewritten files plus merged manifests.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING

from ...utils.error_format import format_error_message
from ...utils.references import component_path
from ...utils.references import rewrite_paths
from ...utils.references import scan_references
from ..merge_utils import merge_dependencies
from .models import ComponentRecord
from .models import ResolutionWarning
from .models import VirtualFileSet

if TYPE_CHECKING:
    from ...registry.client import RegistryClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8


@dataclass
class _Accumulator:
    """Mutable resolution state private to one session."""

    files: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    warnings: list[ResolutionWarning] = field(default_factory=list)


@dataclass
class _Outcome:
    """Result of fetching one frontier member."""

    identifier: str
    record: ComponentRecord | None = None
    error: str | None = None


class ResolutionSession:
    """Resolves a reference graph against a registry, one round at a time.

    Features:
    - Round-synchronized fan-out (all fetches of a round run concurrently)
    - At-most-once fetch per identifier (visited set marked before fan-out)
    - Cycle and self-reference safety
    - Soft failures: missing or broken components are skipped with a warning

    A session is single-use; create a new one per resolution request.
    """

    def __init__(self, registry: RegistryClient, max_concurrency: int = DEFAULT_MAX_CONCURRENCY):
        """Initialize session.

        Args:
            registry: Client used to fetch component records
            max_concurrency: Upper bound on simultaneous registry fetches
        """
        self.registry = registry
        self.max_concurrency = max(1, max_concurrency)
        self.visited: set[str] = set()
        self.rounds = 0
        self._state = _Accumulator()
        self._lock = asyncio.Lock()
        self._semaphore: asyncio.Semaphore | None = None
        self._used = False

    async def resolve(
        self,
        seeds: Iterable[str] | str,
        extra_identifiers: Iterable[str] = (),
    ) -> VirtualFileSet:
        """Resolve everything referenced by the seed texts.

        Args:
            seeds: Source text(s) to scan for the initial frontier
            extra_identifiers: Registry identifiers resolved alongside the scan

        Returns:
            VirtualFileSet with one file per resolved component and merged manifests
        """
        if self._used:
            raise RuntimeError("ResolutionSession instances are single-use")
        self._used = True
        self._semaphore = asyncio.Semaphore(self.max_concurrency)

        if isinstance(seeds, str):
            seeds = [seeds]

        frontier: list[str] = []
        for text in seeds:
            _extend_unique(frontier, scan_references(text))
        _extend_unique(frontier, extra_identifiers)

        while frontier:
            frontier = await self._expand(frontier)

        logger.debug(
            f"Resolution finished after {self.rounds} round(s): "
            f"{len(self._state.files)} file(s), {len(self._state.warnings)} warning(s)"
        )
        return VirtualFileSet(
            files=dict(self._state.files),
            dependencies=dict(self._state.dependencies),
            dev_dependencies=dict(self._state.dev_dependencies),
            warnings=list(self._state.warnings),
        )

    async def _expand(self, frontier: list[str]) -> list[str]:
        """Run one round and return the next frontier."""
        pending = [identifier for identifier in frontier if identifier not in self.visited]
        if not pending:
            return []

        # Mark before fan-out so siblings referencing the same id never refetch it
        self.visited.update(pending)
        self.rounds += 1
        logger.debug(f"Round {self.rounds}: fetching {', '.join(pending)}")

        outcomes = await asyncio.gather(*(self._fetch(identifier) for identifier in pending))

        next_frontier: list[str] = []
        async with self._lock:
            # Fold results in frontier order so last-write-wins is deterministic
            for outcome in outcomes:
                _extend_unique(next_frontier, self._apply(outcome))

        return [identifier for identifier in next_frontier if identifier not in self.visited]

    async def _fetch(self, identifier: str) -> _Outcome:
        assert self._semaphore is not None
        async with self._semaphore:
            try:
                record = await self.registry.fetch(identifier)
            except Exception as e:
                return _Outcome(identifier, error=format_error_message(e))

        if record is None:
            return _Outcome(identifier, error="component not found in registry")
        return _Outcome(identifier, record=record)

    def _apply(self, outcome: _Outcome) -> list[str]:
        """Store a fetched component and return the identifiers it references."""
        if outcome.record is None:
            logger.warning(f"Failed to load registry component: {outcome.identifier} ({outcome.error})")
            self._state.warnings.append(ResolutionWarning(identifier=outcome.identifier, reason=outcome.error or ""))
            return []

        record = outcome.record
        name = record.name or outcome.identifier
        path = component_path(name)

        # First record published under a name owns its path
        if path in self._state.files:
            reason = f"published as '{name}', which is already resolved"
            logger.warning(f"Skipping registry component: {outcome.identifier} ({reason})")
            self._state.warnings.append(ResolutionWarning(identifier=outcome.identifier, reason=reason))
            return []

        content = rewrite_paths(record.content)
        self._state.files[path] = content
        merge_dependencies(self._state.dependencies, record.dependencies)
        merge_dependencies(self._state.dev_dependencies, record.dev_dependencies)

        # The record may be published under a different name than requested
        self.visited.add(name)
        return scan_references(content, exclude=name)


def _extend_unique(target: list[str], identifiers: Iterable[str]) -> None:
    for identifier in identifiers:
        if identifier not in target:
            target.append(identifier)


async def resolve_components(
    registry: RegistryClient,
    seeds: Iterable[str] | str,
    extra_identifiers: Iterable[str] = (),
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> VirtualFileSet:
    """Resolve seed text(s) in a fresh session."""
    session = ResolutionSession(registry, max_concurrency=max_concurrency)
    return await session.resolve(seeds, extra_identifiers)
