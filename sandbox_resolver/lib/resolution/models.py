"""Data models for component resolution."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from ..merge_utils import normalize_dependencies


class ComponentFile(BaseModel):
    """One source block of a registry component."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    content: str = ""
    path: str | None = None


class ComponentRecord(BaseModel):
    """A component as stored in the registry.

    Accepts the registry item JSON shape (camelCase keys) as well as field
    names. Dependency declarations are normalized to name -> version maps on
    load, whichever form the registry used.

    Attributes:
        name: Canonical identifier of the component
        files: Source blocks; only the first one is ever used
        dependencies: Runtime package dependencies
        dev_dependencies: Development package dependencies
        registry_dependencies: Other registry components this one requires
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str
    files: list[ComponentFile] = Field(default_factory=list)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    registry_dependencies: list[str] = Field(default_factory=list, alias="registryDependencies")

    @field_validator("dependencies", "dev_dependencies", mode="before")
    @classmethod
    def _normalize_dependencies(cls, value: Any) -> dict[str, str]:
        return normalize_dependencies(value)

    @field_validator("registry_dependencies", mode="before")
    @classmethod
    def _listify_registry_dependencies(cls, value: Any) -> list[str]:
        if not value:
            return []
        if isinstance(value, str):
            raise ValueError(f"expected a list of registry identifiers, got string {value!r}")
        if isinstance(value, dict):
            return list(value.values())
        return list(value)

    @property
    def content(self) -> str:
        """Text of the first source block, empty when the record has none."""
        if not self.files:
            return ""
        return self.files[0].content


class ResolutionWarning(BaseModel):
    """A component that could not be resolved and was skipped."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    reason: str


class VirtualFileSet(BaseModel):
    """Resolved sandbox file tree plus merged manifests.

    Attributes:
        files: Sandbox path -> final source text
        dependencies: Merged runtime dependencies
        dev_dependencies: Merged development dependencies
        warnings: Components skipped during resolution
        template: Sandbox template name
        external_resources: Extra resources loaded by the sandbox page
    """

    model_config = ConfigDict(frozen=True)

    files: dict[str, str] = Field(default_factory=dict)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict)
    warnings: list[ResolutionWarning] = Field(default_factory=list)
    template: str = "react-ts"
    external_resources: list[str] = Field(default_factory=list)

    def to_sandbox_setup(self) -> dict[str, Any]:
        """Convert to the setup payload consumed by the sandbox runtime."""
        return {
            "template": self.template,
            "files": dict(self.files),
            "customSetup": {
                "dependencies": dict(self.dependencies),
                "devDependencies": dict(self.dev_dependencies),
            },
            "options": {"externalResources": list(self.external_resources)},
        }


class PreviewRequest(BaseModel):
    """Caller input for assembling one preview.

    Attributes:
        name: Entry component name
        code: Demo source rendered as the sandbox entry file
        dependencies: Explicit extra dependencies; always override discovered ones
        registry_dependencies: Extra registry identifiers resolved alongside the scan
    """

    model_config = ConfigDict(frozen=True)

    name: str
    code: str
    dependencies: dict[str, str] = Field(default_factory=dict)
    registry_dependencies: list[str] = Field(default_factory=list)

    @field_validator("dependencies", mode="before")
    @classmethod
    def _normalize_dependencies(cls, value: Any) -> dict[str, str]:
        return normalize_dependencies(value)
