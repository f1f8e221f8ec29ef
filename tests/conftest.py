"""Shared pytest fixtures and test helpers for dropctl tests."""

from __future__ import annotations

from collections.abc import Generator, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from dropctl.config.settings import DropSettings
from dropctl.infrastructure.process import ProcessRunner
from dropctl.infrastructure.project import Project
from dropctl.services.telemetry import disable_telemetry

SITE_TEMPLATE = "<?php\n// Local development overrides.\n"


class FakeProcessRunner(ProcessRunner):
    """ProcessRunner that records calls instead of spawning processes.

    *statuses* maps an executable (first argv element, or the whole
    shell string) to the exit code it should return. Unlisted commands
    succeed.
    """

    def __init__(self, statuses: Mapping[str, int] | None = None) -> None:
        super().__init__(interactive=False)
        self.statuses = dict(statuses or {})
        self.calls: list[dict[str, Any]] = []

    def run(
        self,
        args: Sequence[str] | str,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        self.calls.append({"args": args, "cwd": cwd, "env": dict(env or {})})
        key = args if isinstance(args, str) else args[0]
        return self.statuses.get(key, 0)


def write_config(root: Path, extra: str = "") -> Path:
    """Write a dropctl.toml suitable for tests into *root*."""
    config = root / "dropctl.toml"
    config.write_text(
        "[project]\n"
        'site = "default"\n'
        "[db]\n"
        f'url = "sqlite:///{root / "db.sqlite"}"\n'
        "[composer]\n"
        'bin = "true"\n'
        "[drush]\n"
        'bin = "true"\n'
        "[alias]\n"
        'rc_file = ".bashrc"\n' + extra,
        encoding="utf-8",
    )
    return config


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project checkout with a docroot, a site, and templates.

    This is the single source of truth for the project layout.
    """
    site_dir = tmp_path / "docroot" / "sites" / "default"
    (site_dir / "settings").mkdir(parents=True)
    (site_dir / "files" / "styles").mkdir(parents=True)
    (site_dir / "settings" / "default.local.settings.php").write_text(SITE_TEMPLATE)
    (site_dir / "default.local.drush.yml").write_text("options: {}\n")
    (site_dir / "settings.php").write_text("<?php\n")

    behat_dir = tmp_path / "tests" / "behat"
    behat_dir.mkdir(parents=True)
    (behat_dir / "example.local.yml").write_text("local:\n  suites: {}\n")

    (tmp_path / ".bashrc").write_text("# shell rc\n")
    write_config(tmp_path)
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> DropSettings:
    return DropSettings.from_cli(repo_root=project_root, no_interact=True)


@pytest.fixture
def fake_process() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def project(settings: DropSettings, fake_process: FakeProcessRunner) -> Project:
    """Project backed by the temp checkout with subprocesses faked out."""
    return Project(settings, process=fake_process)


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project so the CLI discovers its dropctl.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    monkeypatch.chdir(project_root)
    monkeypatch.delenv("DROPCTL_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` enables telemetry for the whole thread; keep tests independent."""
    disable_telemetry()
    yield
    disable_telemetry()
