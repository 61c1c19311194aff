from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_serializer, field_validator


class DependencyKind(str, Enum):
    FRAMEWORK = "framework"
    CARTHAGE = "carthage"


class TargetKind(str, Enum):
    APPLICATION = "application"
    UNIT_TEST_BUNDLE = "bundle.unit-test"
    UI_TEST_BUNDLE = "bundle.ui-testing"


class BuildConfigType(str, Enum):
    DEBUG = "debug"
    RELEASE = "release"


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass(frozen=True)
class ValidationIssue:
    severity: Severity
    location: str
    message: str


class ComponentSpec(BaseModel):
    """Shared shape of apps and features: a name plus its declared edges."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    dependencies: tuple[str, ...] = ()
    external_dependencies: frozenset[str] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("external_dependencies", "externalDependencies", "carthageDependencies"),
    )

    @field_validator("dependencies", "external_dependencies", mode="before")
    @classmethod
    def _absent_is_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @field_serializer("external_dependencies")
    def _sorted_external_dependencies(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


class FeatureSpec(ComponentSpec):
    """A reusable internal module; never built as an app on its own."""


class AppSpec(ComponentSpec):
    """A buildable product: one application target plus its two test bundles."""

    @property
    def target_name(self) -> str:
        return self.name

    @property
    def unit_test_target_name(self) -> str:
        return f"{self.name}Tests"

    @property
    def ui_test_target_name(self) -> str:
        return f"{self.name}UITests"

    @property
    def target_names(self) -> tuple[str, str, str]:
        return (self.target_name, self.unit_test_target_name, self.ui_test_target_name)


class WorkspaceSpec(BaseModel):
    """Structured workspace document as handed over by an upstream parser."""

    model_config = ConfigDict(frozen=True)

    apps: list[AppSpec] = Field(default_factory=list)
    features: list[FeatureSpec] = Field(default_factory=list)


class Dependency(BaseModel):
    """One resolved build dependency of a target.

    ``kind`` plus ``name`` is the identity; the flags mirror the project
    writer's link/embed/implicit switches.
    """

    model_config = ConfigDict(frozen=True)

    kind: DependencyKind
    name: str
    link: bool = True
    embed: bool = True
    implicit: bool = False

    @classmethod
    def internal_module(cls, name: str) -> "Dependency":
        # Feature frameworks ship inside the app bundle.
        return cls(kind=DependencyKind.FRAMEWORK, name=name, link=True, embed=True, implicit=True)

    @classmethod
    def external_package(cls, reference: str) -> "Dependency":
        return cls(kind=DependencyKind.CARTHAGE, name=reference, link=True, embed=True, implicit=False)

    @property
    def identity(self) -> tuple[DependencyKind, str]:
        return (self.kind, self.name)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def reference(self) -> str:
        if self.kind is DependencyKind.FRAMEWORK:
            return f"{self.name}.framework"
        return self.name


class TargetSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str


class TargetScheme(BaseModel):
    model_config = ConfigDict(frozen=True)

    test_targets: tuple[str, ...] = ()
    gather_coverage_data: bool = True
    command_line_arguments: dict[str, bool] = Field(default_factory=dict)


class Target(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: TargetKind
    platform: str = "iOS"
    sources: tuple[TargetSource, ...]
    dependencies: tuple[Dependency, ...] = ()
    scheme: TargetScheme = Field(default_factory=TargetScheme)
    prebuild_scripts: tuple[str, ...] = ()
    postbuild_scripts: tuple[str, ...] = ()

    @property
    def test_targets(self) -> tuple[str, ...]:
        return self.scheme.test_targets


class BuildConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: BuildConfigType


class ProjectOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    bundle_id_prefix: str = "at.imobility"
    external_package_build_path: str = "../Carthage/Build"


class Project(BaseModel):
    """Assembled project handed to a ``ProjectWriter``."""

    model_config = ConfigDict(frozen=True)

    name: str
    base_path: Path
    configs: tuple[BuildConfig, ...]
    targets: tuple[Target, ...]
    options: ProjectOptions = Field(default_factory=ProjectOptions)

    def target(self, name: str) -> Target | None:
        for target in self.targets:
            if target.name == name:
                return target
        return None
