"""Merge utilities for package manifests.

This module provides the policy for how dependency declarations collected
from many components are folded into one manifest. The key policy decision:
conflicting version constraints are NOT reconciled - the most recently merged
value replaces the earlier one (last write wins).
"""

from collections.abc import Iterable
from collections.abc import Mapping

DEFAULT_VERSION = "latest"


def parse_dependency(dependency: str) -> tuple[str, str]:
    """Split a ``name`` or ``name@version`` reference.

    The version separator is the last ``@`` that is not the leading
    character, so scoped packages keep their ``@scope/`` prefix.
    Strings that cannot be split fall back to the whole string as the
    name with the default version.

    Args:
        dependency: Raw dependency reference

    Returns:
        Tuple of (name, version)

    Examples:
        >>> parse_dependency("foo")
        ('foo', 'latest')
        >>> parse_dependency("foo@1.2.3")
        ('foo', '1.2.3')
        >>> parse_dependency("@scope/foo@2.0.0")
        ('@scope/foo', '2.0.0')
    """
    dependency = dependency.strip()
    name, separator, version = dependency.rpartition("@")
    if not separator or not name or not version:
        return dependency, DEFAULT_VERSION
    return name, version


def normalize_dependencies(declared: Mapping[str, str] | Iterable[str] | None) -> dict[str, str]:
    """Normalize a declared dependency collection to a name -> version map.

    Accepts either a list of reference strings (registry item format) or a
    mapping of name to version constraint. Blank versions become ``latest``.

    Raises:
        ValueError: If given a bare string instead of a collection
    """
    if not declared:
        return {}

    if isinstance(declared, str):
        raise ValueError(f"expected a list or mapping of dependencies, got string {declared!r}")

    if isinstance(declared, Mapping):
        return {name: (version or DEFAULT_VERSION) for name, version in declared.items() if name}

    normalized: dict[str, str] = {}
    for reference in declared:
        name, version = parse_dependency(reference)
        if name:
            normalized[name] = version
    return normalized


def merge_dependencies(target: dict[str, str], declared: Mapping[str, str] | Iterable[str] | None) -> dict[str, str]:
    """Fold declared dependencies into ``target`` in place, last write wins.

    Args:
        target: Accumulator manifest (mutated)
        declared: Dependencies to fold in, as a list of references or a mapping

    Returns:
        The same ``target`` dict, for chaining
    """
    for name, version in normalize_dependencies(declared).items():
        target[name] = version
    return target


def merge_manifests(*manifests: Mapping[str, str] | None) -> dict[str, str]:
    """Merge manifests left to right into a new dict; later manifests win."""
    merged: dict[str, str] = {}
    for manifest in manifests:
        merge_dependencies(merged, manifest)
    return merged
