from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .models import ProjectOptions

VALID_PLATFORMS: frozenset[str] = frozenset({"iOS", "macOS", "tvOS", "watchOS"})


@dataclass(frozen=True)
class GeneratorSettings:
    """Generator settings loaded from environment with fail-fast validation."""

    bundle_id_prefix: str = "at.imobility"
    external_package_build_path: str = "../Carthage/Build"
    platform: str = "iOS"
    output_root: str = "generated"
    workspace_file: str = "workspace.json"
    max_workers: int = 1

    @classmethod
    def from_env(cls) -> "GeneratorSettings":
        return cls(
            bundle_id_prefix=os.getenv("XCPROJ_BUNDLE_ID_PREFIX", "at.imobility"),
            external_package_build_path=os.getenv("XCPROJ_EXTERNAL_BUILD_PATH", "../Carthage/Build"),
            platform=os.getenv("XCPROJ_PLATFORM", "iOS"),
            output_root=os.getenv("XCPROJ_OUTPUT_ROOT", "generated"),
            workspace_file=os.getenv("XCPROJ_WORKSPACE_FILE", "workspace.json"),
            max_workers=_get_env_int("XCPROJ_MAX_WORKERS", default=1, minimum=1, maximum=64),
        ).normalized()

    def normalized(self) -> "GeneratorSettings":
        """Validate and normalize all fields. Raises ValueError on invalid configuration."""
        bundle_id_prefix = self.bundle_id_prefix.strip().rstrip(".")
        if not bundle_id_prefix:
            raise ValueError("XCPROJ_BUNDLE_ID_PREFIX must be non-empty")
        if any(not part for part in bundle_id_prefix.split(".")):
            raise ValueError(f"XCPROJ_BUNDLE_ID_PREFIX must be a dotted identifier, got: {self.bundle_id_prefix!r}")

        external_package_build_path = self.external_package_build_path.strip()
        if not external_package_build_path:
            raise ValueError("XCPROJ_EXTERNAL_BUILD_PATH must be non-empty")

        platform = self.platform.strip()
        if platform not in VALID_PLATFORMS:
            raise ValueError(f"XCPROJ_PLATFORM must be one of: {', '.join(sorted(VALID_PLATFORMS))}")

        if not self.output_root.strip():
            raise ValueError("XCPROJ_OUTPUT_ROOT must be non-empty")
        if not self.workspace_file.strip():
            raise ValueError("XCPROJ_WORKSPACE_FILE must be non-empty")
        if not 1 <= self.max_workers <= 64:
            raise ValueError(f"XCPROJ_MAX_WORKERS must be within [1, 64], got: {self.max_workers}")

        return GeneratorSettings(
            bundle_id_prefix=bundle_id_prefix,
            external_package_build_path=external_package_build_path,
            platform=platform,
            output_root=self.output_root.strip(),
            workspace_file=self.workspace_file.strip(),
            max_workers=self.max_workers,
        )

    def project_options(self) -> ProjectOptions:
        return ProjectOptions(
            bundle_id_prefix=self.bundle_id_prefix,
            external_package_build_path=self.external_package_build_path,
        )

    def output_root_path(self, base: Path) -> Path:
        path = Path(self.output_root)
        return path if path.is_absolute() else base / path

    def workspace_file_path(self, base: Path) -> Path:
        path = Path(self.workspace_file)
        return path if path.is_absolute() else base / path


def _get_env_int(name: str, default: int, minimum: int, maximum: int = 10_000_000) -> int:
    """Parse an integer from an environment variable with bounds checking.

    Raises:
        ValueError: If the value is not an integer or is outside bounds.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        parsed = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from exc
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got: {parsed}")
    if parsed > maximum:
        raise ValueError(f"{name} must be <= {maximum}, got: {parsed}")
    return parsed
