"""Pytest configuration for sandbox-resolver tests."""

import asyncio
import logging
from typing import Any

import pytest

from sandbox_resolver.lib.resolution.models import ComponentRecord
from sandbox_resolver.logging_setup import JsonlHandler
from sandbox_resolver.registry.client import StaticRegistryClient


def make_record(
    name: str,
    content: str = "",
    dependencies: Any = None,
    dev_dependencies: Any = None,
    registry_dependencies: list[str] | None = None,
) -> dict[str, Any]:
    """Build a registry item dict in the published JSON shape."""
    return {
        "name": name,
        "dependencies": dependencies or [],
        "devDependencies": dev_dependencies or [],
        "registryDependencies": registry_dependencies or [],
        "files": [{"path": f"ui/{name}.tsx", "content": content}],
    }


def imports(*identifiers: str) -> str:
    """Source text importing each identifier through the canonical prefix."""
    return "\n".join(
        f'import {{ {identifier.title()} }} from "@/components/ui/{identifier}";' for identifier in identifiers
    )


class RecordingRegistry(StaticRegistryClient):
    """Static registry that records every fetch and can inject delays or failures."""

    def __init__(self, records, delay: float = 0.0, failures: dict[str, Exception] | None = None):
        super().__init__(records)
        self.delay = delay
        self.failures = failures or {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, identifier: str) -> ComponentRecord | None:
        self.calls.append(identifier)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if identifier in self.failures:
                raise self.failures[identifier]
            return await super().fetch(identifier)
        finally:
            self.in_flight -= 1


@pytest.fixture
def button_registry():
    """Registry where button references icon and icon references nothing."""
    return RecordingRegistry(
        {
            "button": make_record(
                "button",
                'import { Icon } from "@/registry/new-york/ui/icon";\nexport const Button = () => <Icon />;',
                dependencies=["@radix-ui/react-slot", "lucide-react@0.400.0"],
                dev_dependencies=["@types/react"],
            ),
            "icon": make_record(
                "icon",
                "export const Icon = () => <svg />;",
                dependencies=["lucide-react@0.452.0"],
            ),
        }
    )


@pytest.fixture(autouse=True)
def _remove_jsonl_handlers():
    """Keep CLI logging bootstrap from leaking handlers between tests."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, JsonlHandler):
            root.removeHandler(handler)
