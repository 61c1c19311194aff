"""Entry point for `python -m xcproj_factory` and the `xcproj` CLI script."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from xcproj_factory.settings import GeneratorSettings
from xcproj_factory.spec_store import SpecStore, load_workspace_file
from xcproj_factory.workspace import WorkspaceGenerator, WorkspaceValidationError
from xcproj_factory.writers import JsonProjectWriter, LocalFileWriter


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate app projects from a workspace specification")
    parser.add_argument("--workspace-file", type=Path, default=None, help="Path to the workspace JSON document")
    parser.add_argument("--output-dir", type=Path, default=None, help="Root directory for generated projects")
    parser.add_argument(
        "--app",
        dest="apps",
        action="append",
        default=None,
        help="Generate only this app (repeatable; default: every app)",
    )
    parser.add_argument("--scaffold", action="store_true", help="Also create each target's initial source tree")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cwd = Path.cwd()
    load_dotenv(dotenv_path=cwd / ".env")
    try:
        settings = GeneratorSettings.from_env()
        workspace_file = args.workspace_file or settings.workspace_file_path(cwd)
        store = SpecStore.from_workspace(load_workspace_file(workspace_file))
    except (OSError, ValueError, ValidationError) as exc:
        logging.error("Unable to load workspace: %s", exc)
        return 1

    output_root = args.output_dir or settings.output_root_path(cwd)
    generator = WorkspaceGenerator(
        store,
        output_root,
        project_writer=JsonProjectWriter(),
        options=settings.project_options(),
        file_writer=LocalFileWriter(),
        platform=settings.platform,
        max_workers=settings.max_workers,
    )
    try:
        report = generator.generate(args.apps, scaffold=args.scaffold)
    except WorkspaceValidationError as exc:
        for issue in exc.issues:
            logging.error("%s: %s", issue.location, issue.message)
        return 1
    except KeyError as exc:
        logging.error("%s", exc.args[0])
        return 1

    print(f"generated_projects={len(report.projects)}")
    for name in sorted(report.projects):
        print(f"project={name} path={generator.project_path_for(store.apps[name])}")
    if report.unresolved:
        print("unresolved:")
        for name, items in sorted(report.unresolved.items()):
            for item in items:
                print(f"  {name}: {item.referrer} -> {item.name}")
    for name, message in sorted(report.failures.items()):
        print(f"failed={name} error={message}")

    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
