from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TypeVar

from .models import AppSpec, ComponentSpec, FeatureSpec, WorkspaceSpec

logger = logging.getLogger(__name__)

SpecT = TypeVar("SpecT", bound=ComponentSpec)


class SpecStore:
    """Read-only, name-indexed view over one workspace's apps and features.

    Loaded once before any resolution starts and never mutated afterwards, so
    a single instance can back concurrent per-app resolutions.
    """

    __slots__ = ("_apps", "_features")

    def __init__(self, apps: Mapping[str, AppSpec], features: Mapping[str, FeatureSpec]) -> None:
        self._apps = MappingProxyType(dict(apps))
        self._features = MappingProxyType(dict(features))

    @classmethod
    def from_workspace(cls, workspace: WorkspaceSpec) -> "SpecStore":
        """Index a parsed workspace by name.

        Raises:
            ValueError: If two apps or two features share a name.
        """
        return cls(
            apps=_index_by_name(workspace.apps, label="app"),
            features=_index_by_name(workspace.features, label="feature"),
        )

    @property
    def apps(self) -> Mapping[str, AppSpec]:
        return self._apps

    @property
    def features(self) -> Mapping[str, FeatureSpec]:
        return self._features

    def app_names(self) -> list[str]:
        return list(self._apps)

    def lookup_feature(self, name: str) -> FeatureSpec | None:
        return self._features.get(name)

    def lookup_app(self, name: str) -> AppSpec | None:
        return self._apps.get(name)

    def __repr__(self) -> str:
        return f"SpecStore(apps={len(self._apps)}, features={len(self._features)})"


def _index_by_name(specs: Iterable[SpecT], *, label: str) -> dict[str, SpecT]:
    indexed: dict[str, SpecT] = {}
    for spec in specs:
        if spec.name in indexed:
            raise ValueError(f"Duplicate {label} name in workspace: {spec.name}")
        indexed[spec.name] = spec
    return indexed


def load_workspace_file(path: Path) -> WorkspaceSpec:
    """Read a workspace JSON document and validate it into a ``WorkspaceSpec``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is empty or not valid UTF-8.
        pydantic.ValidationError: If the document does not match the schema.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Workspace file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"Workspace file at {path} contains invalid UTF-8 data") from exc
    if not text.strip():
        raise ValueError(f"Workspace file at {path} is empty")
    workspace = WorkspaceSpec.model_validate_json(text)
    logger.debug("Loaded workspace %s: %d apps, %d features", path, len(workspace.apps), len(workspace.features))
    return workspace
