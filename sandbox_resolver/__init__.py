"""Resolve registry components into flat sandbox file trees."""

from .lib.resolution import PreviewRequest
from .lib.resolution import ResolutionSession
from .lib.resolution import VirtualFileSet
from .lib.resolution import assemble_preview
from .lib.resolution import resolve_components

__all__ = [
    "PreviewRequest",
    "ResolutionSession",
    "VirtualFileSet",
    "assemble_preview",
    "resolve_components",
]
