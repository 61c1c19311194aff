from importlib.metadata import version

from .canonical import to_canonical_json
from .models import (
    AppSpec,
    BuildConfig,
    BuildConfigType,
    ComponentSpec,
    Dependency,
    DependencyKind,
    FeatureSpec,
    Project,
    ProjectOptions,
    Severity,
    Target,
    TargetKind,
    TargetScheme,
    TargetSource,
    ValidationIssue,
    WorkspaceSpec,
)
from .project import DEFAULT_BUILD_CONFIGS, AppProjectGenerator, assemble_project
from .resolver import DependencyResolver, DependencyResolverFn, ResolvedDependencies, UnresolvedDependency
from .scaffold import Scaffolder, ScaffoldPlan
from .spec_store import SpecStore, load_workspace_file
from .targets import TargetAssembler
from .utils import find_feature_cycles, find_target_name_collisions, validate_workspace
from .workspace import WorkspaceGenerator, WorkspaceReport, WorkspaceValidationError
from .writers import FileWriter, JsonProjectWriter, LocalFileWriter, ProjectWriter


def get_version() -> str:
    try:
        return version("xcproj-factory")
    except Exception:
        return "0.0.0"


__all__ = [
    "AppProjectGenerator",
    "AppSpec",
    "BuildConfig",
    "BuildConfigType",
    "ComponentSpec",
    "DEFAULT_BUILD_CONFIGS",
    "Dependency",
    "DependencyKind",
    "DependencyResolver",
    "DependencyResolverFn",
    "FeatureSpec",
    "FileWriter",
    "JsonProjectWriter",
    "LocalFileWriter",
    "Project",
    "ProjectOptions",
    "ProjectWriter",
    "ResolvedDependencies",
    "ScaffoldPlan",
    "Scaffolder",
    "Severity",
    "SpecStore",
    "Target",
    "TargetAssembler",
    "TargetKind",
    "TargetScheme",
    "TargetSource",
    "UnresolvedDependency",
    "ValidationIssue",
    "WorkspaceGenerator",
    "WorkspaceReport",
    "WorkspaceSpec",
    "WorkspaceValidationError",
    "assemble_project",
    "find_feature_cycles",
    "find_target_name_collisions",
    "load_workspace_file",
    "to_canonical_json",
    "validate_workspace",
]
