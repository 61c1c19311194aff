from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .models import AppSpec, Dependency, Project, ProjectOptions, Severity, ValidationIssue
from .project import AppProjectGenerator
from .resolver import DependencyResolver, DependencyResolverFn, UnresolvedDependency
from .spec_store import SpecStore
from .utils import validate_workspace
from .writers import FileWriter, ProjectWriter

logger = logging.getLogger(__name__)


class WorkspaceValidationError(ValueError):
    """Raised before generation starts when the workspace has ERROR issues."""

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues = list(issues)
        details = "; ".join(f"{issue.location}: {issue.message}" for issue in self.issues)
        super().__init__(f"Workspace validation failed: {details}")


@dataclass
class WorkspaceReport:
    projects: dict[str, Project] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    unresolved: dict[str, tuple[UnresolvedDependency, ...]] = field(default_factory=dict)
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class _AppOutcome:
    app: str
    project: Project | None = None
    error: str | None = None
    unresolved: tuple[UnresolvedDependency, ...] = ()


class WorkspaceGenerator:
    """Generates one project per app from a shared, read-only ``SpecStore``.

    A failing app is recorded and skipped; the others still generate. With
    ``max_workers > 1`` apps run on a thread pool, which is safe because
    resolution never mutates the store.
    """

    def __init__(
        self,
        store: SpecStore,
        output_root: Path,
        *,
        project_writer: ProjectWriter,
        options: ProjectOptions | None = None,
        file_writer: FileWriter | None = None,
        dependency_resolver: DependencyResolverFn | None = None,
        platform: str = "iOS",
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got: {max_workers}")
        self.store = store
        self.output_root = output_root
        self.project_writer = project_writer
        self.options = options if options is not None else ProjectOptions()
        self.file_writer = file_writer
        self.dependency_resolver = dependency_resolver
        self.platform = platform
        self.max_workers = max_workers
        self._resolver = DependencyResolver(store)

    def project_path_for(self, app: AppSpec) -> Path:
        return self.output_root / app.name / f"{app.name}.xcodeproj"

    def validate(self) -> list[ValidationIssue]:
        return validate_workspace(self.store)

    def _select_apps(self, app_names: Sequence[str] | None) -> list[AppSpec]:
        if app_names is None:
            return list(self.store.apps.values())
        apps: list[AppSpec] = []
        for name in app_names:
            app = self.store.lookup_app(name)
            if app is None:
                raise KeyError(f"Unknown app: {name}")
            apps.append(app)
        return apps

    def _generate_app(self, app: AppSpec, *, scaffold: bool) -> _AppOutcome:
        unresolved: tuple[UnresolvedDependency, ...] = ()
        try:
            if self.dependency_resolver is not None:
                strategy = self.dependency_resolver
            else:
                resolution = self._resolver.resolve(app)
                unresolved = resolution.unresolved
                dependencies = resolution.to_dependencies()

                def strategy(_app: AppSpec) -> list[Dependency]:
                    return list(dependencies)

            generator = AppProjectGenerator(
                app,
                self.project_path_for(app),
                strategy,
                project_writer=self.project_writer,
                options=self.options,
                file_writer=self.file_writer,
                platform=self.platform,
            )
            project = generator.generate()
            if scaffold:
                generator.scaffold()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Generation failed for app %s", app.name)
            return _AppOutcome(app=app.name, error=f"{type(exc).__name__}: {exc}", unresolved=unresolved)
        return _AppOutcome(app=app.name, project=project, unresolved=unresolved)

    def generate(self, app_names: Sequence[str] | None = None, *, scaffold: bool = False) -> WorkspaceReport:
        """Validate the workspace, then generate the selected apps (all by default).

        Raises:
            WorkspaceValidationError: If validation reports any ERROR issue.
            KeyError: If a requested app name is not in the workspace.
        """
        issues = self.validate()
        for issue in issues:
            if issue.severity is Severity.WARNING:
                logger.warning("%s: %s", issue.location, issue.message)
        errors = [issue for issue in issues if issue.severity is Severity.ERROR]
        if errors:
            raise WorkspaceValidationError(errors)

        apps = self._select_apps(app_names)
        if self.max_workers == 1 or len(apps) <= 1:
            outcomes = [self._generate_app(app, scaffold=scaffold) for app in apps]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(lambda app: self._generate_app(app, scaffold=scaffold), apps))

        report = WorkspaceReport(issues=issues)
        for outcome in outcomes:
            if outcome.unresolved:
                report.unresolved[outcome.app] = outcome.unresolved
            if outcome.project is not None:
                report.projects[outcome.app] = outcome.project
            else:
                report.failures[outcome.app] = outcome.error or "unknown error"
        logger.info("Generated %d of %d projects", len(report.projects), len(apps))
        return report
