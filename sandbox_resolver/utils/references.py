"""Pure text processing for component references - no registry I/O."""

import re
from re import Pattern

# Prefix emitted by registry builds (e.g. shadcn "new-york" style)
RAW_REGISTRY_PREFIX = "@/registry/new-york/ui/"

# Prefix every resolved component is imported through inside the sandbox
CANONICAL_PREFIX = "@/components/ui/"

# Sub-directory holding the entry component itself - never a registry reference
RESERVED_SEGMENT = "kibo-ui/"

RAW_REGISTRY_PATTERN: Pattern = re.compile(re.escape(RAW_REGISTRY_PREFIX))

# @/components/ui/<identifier> up to the next quote or whitespace
REFERENCE_PATTERN: Pattern = re.compile(
    rf"{re.escape(CANONICAL_PREFIX)}(?!{re.escape(RESERVED_SEGMENT)})([^'\"\s]+)"
)


def rewrite_paths(text: str) -> str:
    """
    Normalize raw registry imports to the canonical component prefix.

    Args:
        text: Component source text

    Returns:
        Source text with every raw registry prefix replaced

    Examples:
        >>> rewrite_paths('import { Button } from "@/registry/new-york/ui/button"')
        'import { Button } from "@/components/ui/button"'
        >>> rewrite_paths('import { cn } from "@/lib/utils"')
        'import { cn } from "@/lib/utils"'
    """
    return RAW_REGISTRY_PATTERN.sub(CANONICAL_PREFIX, text)


def scan_references(text: str, exclude: str | None = None) -> list[str]:
    """
    Extract the distinct component identifiers referenced by source text.

    Text is rewritten before matching, so raw registry imports are found too.
    Identifiers are returned in order of first appearance.

    Args:
        text: Component source text
        exclude: Identifier of the component being scanned (self-references dropped)

    Returns:
        List of unique identifiers, empty when nothing is referenced

    Examples:
        >>> scan_references('from "@/components/ui/button";\\nfrom "@/components/ui/button"')
        ['button']
        >>> scan_references('from "@/components/ui/kibo-ui/gantt"')
        []
        >>> scan_references('from "@/components/ui/card"', exclude="card")
        []
    """
    identifiers: list[str] = []
    for identifier in REFERENCE_PATTERN.findall(rewrite_paths(text)):
        if identifier == exclude or identifier in identifiers:
            continue
        identifiers.append(identifier)
    return identifiers


def has_references(text: str) -> bool:
    """Check if text references any registry component."""
    return bool(scan_references(text))


def component_path(identifier: str) -> str:
    """
    Canonical sandbox path for a resolved component.

    Examples:
        >>> component_path("button")
        '/components/ui/button.tsx'
    """
    return f"/components/ui/{identifier}.tsx"


def entry_component_path(name: str) -> str:
    """
    Sandbox path for the entry component itself.

    Examples:
        >>> entry_component_path("gantt")
        '/components/ui/kibo-ui/gantt.tsx'
    """
    return f"/components/ui/{RESERVED_SEGMENT}{name}.tsx"
