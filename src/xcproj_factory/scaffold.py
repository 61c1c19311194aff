from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import templates
from .models import AppSpec, TargetKind
from .writers import FileWriter

logger = logging.getLogger(__name__)

TARGET_SUBDIRECTORIES: tuple[str, ...] = ("Sources", "Resources", "Config")


@dataclass(frozen=True)
class ScaffoldPlan:
    """Directory and file requests for one target, issued as one batch."""

    directories: tuple[Path, ...]
    files: dict[Path, str] = field(default_factory=dict)


class Scaffolder:
    """Lays out the initial source tree of each target through a ``FileWriter``."""

    def __init__(self, file_writer: FileWriter) -> None:
        self.file_writer = file_writer

    def plan_target(self, root: Path, kind: TargetKind, *, app_name: str) -> ScaffoldPlan:
        sources = root / "Sources"
        directories = (root, *(root / name for name in TARGET_SUBDIRECTORIES))

        if kind is TargetKind.APPLICATION:
            files = {
                root / "Info.plist": templates.app_plist(),
                sources / "Dependencies.swift": templates.dependencies_source(app_name),
                sources / "AppDelegate.swift": templates.app_delegate_source(),
            }
        elif kind is TargetKind.UNIT_TEST_BUNDLE:
            files = {root / "Info.plist": templates.unit_test_plist()}
        else:
            files = {root / "Info.plist": templates.ui_test_plist()}
        return ScaffoldPlan(directories=directories, files=files)

    def scaffold_target(self, target_name: str, root: Path, kind: TargetKind, *, app_name: str) -> ScaffoldPlan:
        plan = self.plan_target(root, kind, app_name=app_name)
        for directory in plan.directories:
            self.file_writer.create_directory(directory)
        for path, content in plan.files.items():
            self.file_writer.write_file(path, content)
        logger.info("Scaffolded target %s at %s", target_name, root)
        return plan

    def scaffold_app(self, app: AppSpec, directory: Path) -> list[ScaffoldPlan]:
        """Scaffold the app's three targets, each rooted at ``directory / <target name>``."""
        layout = (
            (app.target_name, TargetKind.APPLICATION),
            (app.unit_test_target_name, TargetKind.UNIT_TEST_BUNDLE),
            (app.ui_test_target_name, TargetKind.UI_TEST_BUNDLE),
        )
        return [
            self.scaffold_target(name, directory / name, kind, app_name=app.name)
            for name, kind in layout
        ]
