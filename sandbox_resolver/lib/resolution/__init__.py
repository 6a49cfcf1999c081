"""Component resolution library.

Discovers registry components referenced by source text, fetches each once,
merges their manifests and assembles a flat sandbox file tree.
"""

from .models import ComponentFile
from .models import ComponentRecord
from .models import PreviewRequest
from .models import ResolutionWarning
from .models import VirtualFileSet
from .preview import assemble_preview
from .scaffold import Baseline
from .session import ResolutionSession
from .session import resolve_components

__all__ = [
    "Baseline",
    "ComponentFile",
    "ComponentRecord",
    "PreviewRequest",
    "ResolutionSession",
    "ResolutionWarning",
    "VirtualFileSet",
    "assemble_preview",
    "resolve_components",
]
