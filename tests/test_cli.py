from __future__ import annotations

import json
from pathlib import Path

import pytest

from xcproj_factory.__main__ import main
from xcproj_factory.settings import GeneratorSettings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "XCPROJ_BUNDLE_ID_PREFIX",
        "XCPROJ_EXTERNAL_BUILD_PATH",
        "XCPROJ_PLATFORM",
        "XCPROJ_OUTPUT_ROOT",
        "XCPROJ_WORKSPACE_FILE",
        "XCPROJ_MAX_WORKERS",
    ):
        # setenv first so teardown also drops values loaded from .env files.
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


def _write_workspace(path: Path, apps: list[dict[str, object]]) -> Path:
    payload = {
        "apps": apps,
        "features": [{"name": "Shared", "externalDependencies": ["Alamofire"]}],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_settings_defaults() -> None:
    settings = GeneratorSettings.from_env()
    assert settings.bundle_id_prefix == "at.imobility"
    assert settings.external_package_build_path == "../Carthage/Build"
    assert settings.platform == "iOS"
    assert settings.max_workers == 1


def test_settings_from_env_normalizes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XCPROJ_BUNDLE_ID_PREFIX", " com.example. ")
    monkeypatch.setenv("XCPROJ_MAX_WORKERS", "4")
    settings = GeneratorSettings.from_env()
    assert settings.bundle_id_prefix == "com.example"
    assert settings.max_workers == 4
    assert settings.project_options().bundle_id_prefix == "com.example"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("XCPROJ_MAX_WORKERS", "abc"),
        ("XCPROJ_MAX_WORKERS", "0"),
        ("XCPROJ_PLATFORM", "android"),
        ("XCPROJ_BUNDLE_ID_PREFIX", "com..example"),
    ],
)
def test_settings_invalid_env_raises(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        GeneratorSettings.from_env()


def test_cli_generates_projects(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    workspace = _write_workspace(tmp_path / "ws.json", [{"name": "Foo", "dependencies": ["Shared", "Ghost"]}])
    output = tmp_path / "out"

    code = main(["--workspace-file", str(workspace), "--output-dir", str(output), "--scaffold"])

    captured = capsys.readouterr().out
    assert code == 0
    assert "generated_projects=1" in captured
    assert "Foo: Foo -> Ghost" in captured
    assert (output / "Foo" / "Foo.xcodeproj" / "project.json").is_file()
    assert (output / "Foo" / "Foo" / "Info.plist").is_file()


def test_cli_uses_settings_defaults_from_dotenv(tmp_path: Path) -> None:
    _write_workspace(tmp_path / "custom.json", [{"name": "Foo", "dependencies": ["Shared"]}])
    (tmp_path / ".env").write_text(
        "XCPROJ_WORKSPACE_FILE=custom.json\nXCPROJ_BUNDLE_ID_PREFIX=com.example\n",
        encoding="utf-8",
    )

    assert main([]) == 0

    payload = json.loads((tmp_path / "generated" / "Foo" / "Foo.xcodeproj" / "project.json").read_text("utf-8"))
    assert payload["options"]["bundle_id_prefix"] == "com.example"


def test_cli_missing_workspace_fails(tmp_path: Path) -> None:
    assert main(["--workspace-file", str(tmp_path / "missing.json")]) == 1


def test_cli_target_collision_fails(tmp_path: Path) -> None:
    workspace = _write_workspace(tmp_path / "ws.json", [{"name": "Foo"}, {"name": "FooUI"}])
    assert main(["--workspace-file", str(workspace), "--output-dir", str(tmp_path / "out")]) == 1
    assert not (tmp_path / "out").exists()


def test_cli_unknown_app_fails(tmp_path: Path) -> None:
    workspace = _write_workspace(tmp_path / "ws.json", [{"name": "Foo"}])
    assert main(["--workspace-file", str(workspace), "--app", "Bar"]) == 1
