from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .models import AppSpec, BuildConfig, BuildConfigType, Dependency, Project, ProjectOptions, Target
from .resolver import DependencyResolverFn
from .scaffold import ScaffoldPlan, Scaffolder
from .targets import TargetAssembler
from .writers import FileWriter, LocalFileWriter, ProjectWriter

logger = logging.getLogger(__name__)

DEFAULT_BUILD_CONFIGS: tuple[BuildConfig, ...] = (
    BuildConfig(name="Debug", type=BuildConfigType.DEBUG),
    BuildConfig(name="Distribution", type=BuildConfigType.RELEASE),
    BuildConfig(name="Release", type=BuildConfigType.RELEASE),
)


def assemble_project(
    app: AppSpec,
    targets: Sequence[Target],
    *,
    base_path: Path,
    options: ProjectOptions,
) -> Project:
    # Target names are assumed unique across apps; callers validate upstream.
    return Project(
        name=app.name,
        base_path=base_path,
        configs=DEFAULT_BUILD_CONFIGS,
        targets=tuple(targets),
        options=options,
    )


class AppProjectGenerator:
    """Generates the project for a single app.

    The dependency strategy is passed in explicitly rather than held in
    module state, so generators for different apps can run side by side.
    Errors from the strategy or the writers propagate unchanged; the project
    is fully assembled in memory before the writer sees it.
    """

    def __init__(
        self,
        spec: AppSpec,
        project_path: Path,
        dependency_resolver: DependencyResolverFn,
        *,
        project_writer: ProjectWriter,
        options: ProjectOptions | None = None,
        file_writer: FileWriter | None = None,
        platform: str = "iOS",
    ) -> None:
        self.spec = spec
        self.project_path = project_path
        self.dependency_resolver = dependency_resolver
        self.project_writer = project_writer
        self.options = options if options is not None else ProjectOptions()
        self.file_writer = file_writer if file_writer is not None else LocalFileWriter()
        self.platform = platform

    @property
    def directory(self) -> Path:
        return self.project_path.parent

    def generate_dependencies(self) -> list[Dependency]:
        return self.dependency_resolver(self.spec)

    def generate_targets(self) -> tuple[Target, Target, Target]:
        dependencies = self.generate_dependencies()
        return TargetAssembler(self.spec, platform=self.platform).assemble(dependencies)

    def generate_project(self) -> Project:
        return assemble_project(
            self.spec,
            self.generate_targets(),
            base_path=self.directory,
            options=self.options,
        )

    def generate(self) -> Project:
        project = self.generate_project()
        self.project_writer.write(project, self.project_path)
        logger.info("Generated project %s at %s", project.name, self.project_path)
        return project

    def scaffold(self) -> list[ScaffoldPlan]:
        return Scaffolder(self.file_writer).scaffold_app(self.spec, self.directory)
