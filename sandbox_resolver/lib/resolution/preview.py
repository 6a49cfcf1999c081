"""Assemble a complete preview sandbox for one entry component.

Combines the caller's demo code, the entry component itself, every registry
component they transitively reference, scaffold files and baseline manifests
into one VirtualFileSet.

Manifest merge order (later wins):
1. Baseline framework dependencies
2. Components discovered by resolution
3. The entry component's own declared dependencies
4. Caller-supplied dependencies (runtime map only)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ...utils.error_format import format_error_message
from ...utils.references import entry_component_path
from ...utils.references import rewrite_paths
from ..merge_utils import merge_manifests
from .models import ComponentRecord
from .models import PreviewRequest
from .models import ResolutionWarning
from .models import VirtualFileSet
from .scaffold import EXTERNAL_RESOURCES
from .scaffold import SCAFFOLD_FILES
from .scaffold import TEMPLATE
from .scaffold import Baseline
from .session import DEFAULT_MAX_CONCURRENCY
from .session import ResolutionSession

if TYPE_CHECKING:
    from ...registry.client import RegistryClient

logger = logging.getLogger(__name__)

ENTRY_FILE = "/App.tsx"


async def load_entry_record(entry_registry: RegistryClient, name: str) -> tuple[ComponentRecord, ResolutionWarning | None]:
    """Fetch the entry component record, degrading to an empty record on failure."""
    try:
        record = await entry_registry.fetch(name)
    except Exception as e:
        reason = format_error_message(e)
    else:
        if record is not None:
            return record, None
        reason = "entry component not found in registry"

    logger.warning(f"Failed to load entry component: {name} ({reason})")
    return ComponentRecord(name=name), ResolutionWarning(identifier=name, reason=reason)


async def assemble_preview(
    request: PreviewRequest,
    registry: RegistryClient,
    entry_registry: RegistryClient | None = None,
    scaffold: Mapping[str, str] | None = None,
    baseline: Baseline | None = None,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> VirtualFileSet:
    """Build the sandbox file set for a preview request.

    Args:
        request: Entry name, demo code and explicit extras
        registry: Registry of shared components referenced by imports
        entry_registry: Registry holding the entry component itself (optional)
        scaffold: Fixed files to inject unmodified (default: SCAFFOLD_FILES)
        baseline: Framework manifests to pre-seed (default: Baseline())
        max_concurrency: Upper bound on simultaneous registry fetches

    Returns:
        VirtualFileSet ready for the sandbox runtime
    """
    scaffold = SCAFFOLD_FILES if scaffold is None else scaffold
    baseline = baseline or Baseline()

    warnings: list[ResolutionWarning] = []
    entry_record = ComponentRecord(name=request.name)
    entry_loaded = False
    if entry_registry is not None:
        entry_record, warning = await load_entry_record(entry_registry, request.name)
        if warning:
            warnings.append(warning)
        else:
            entry_loaded = True

    entry_content = rewrite_paths(entry_record.content)
    extra_identifiers = [*entry_record.registry_dependencies, *request.registry_dependencies]

    session = ResolutionSession(registry, max_concurrency=max_concurrency)
    resolved = await session.resolve([request.code, entry_content], extra_identifiers)

    files = dict(resolved.files)
    if entry_loaded:
        files[entry_component_path(request.name)] = entry_content
    files.update(scaffold)
    files[ENTRY_FILE] = request.code

    dependencies = merge_manifests(
        baseline.dependencies,
        resolved.dependencies,
        entry_record.dependencies,
        request.dependencies,
    )
    dev_dependencies = merge_manifests(
        baseline.dev_dependencies,
        resolved.dev_dependencies,
        entry_record.dev_dependencies,
    )

    logger.info(
        f"Assembled preview '{request.name}': {len(files)} file(s), "
        f"{len(dependencies)} dependencies, {len(dev_dependencies)} dev dependencies"
    )
    return VirtualFileSet(
        files=files,
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
        warnings=[*warnings, *resolved.warnings],
        template=TEMPLATE,
        external_resources=list(EXTERNAL_RESOURCES),
    )
