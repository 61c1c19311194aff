"""Collaborator interfaces for everything that touches the filesystem.

The resolution and assembly core only ever talks to ``FileWriter`` and
``ProjectWriter``. The local implementations below back the CLI; tests and
embedding tools can pass their own.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from .canonical import to_canonical_json
from .models import Project

logger = logging.getLogger(__name__)

PROJECT_DESCRIPTOR_NAME = "project.json"


class FileWriter(Protocol):
    """Creates directories and initial files for scaffolded targets."""

    def create_directory(self, path: Path) -> None:
        ...

    def write_file(self, path: Path, content: str) -> None:
        ...


class ProjectWriter(Protocol):
    """Persists an assembled ``Project`` at a destination path."""

    def write(self, project: Project, path: Path) -> None:
        ...


def _atomic_write_text(path: Path, content: str) -> None:
    """Write *content* to *path* through a temp file in the same directory.

    ``os.replace`` keeps readers from ever seeing a half-written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp_handle:
            tmp_handle.write(content)
            tmp_handle.flush()
            os.fsync(tmp_handle.fileno())
        os.replace(tmp_path, str(path))
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class LocalFileWriter:
    """``FileWriter`` backed by the local filesystem.

    Existing files are left untouched unless ``overwrite`` is set, so
    re-running the scaffolder never clobbers edited sources.
    """

    def __init__(self, *, overwrite: bool = False) -> None:
        self.overwrite = overwrite

    def create_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, content: str) -> None:
        if path.exists() and not self.overwrite:
            logger.info("Keeping existing file: %s", path)
            return
        _atomic_write_text(path, content)
        logger.debug("Wrote %s (%d bytes)", path, len(content))


class JsonProjectWriter:
    """Writes the project descriptor as RFC 8785 canonical JSON.

    ``path`` is the project bundle directory (``Foo/Foo.xcodeproj``); the
    descriptor lands at ``<path>/project.json``. Output is byte-for-byte
    reproducible for the same project.
    """

    def descriptor_path(self, path: Path) -> Path:
        return path / PROJECT_DESCRIPTOR_NAME

    def write(self, project: Project, path: Path) -> None:
        target = self.descriptor_path(path)
        _atomic_write_text(target, to_canonical_json(project) + "\n")
        logger.info("Wrote project %s to %s", project.name, target)
