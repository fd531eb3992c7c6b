"""Shared pytest fixtures for Dev Task Launcher tests."""

import json
import threading
from pathlib import Path

import pytest

from dev_task_launcher.core.errors import DiscoveryFailure, SpawnFailure
from dev_task_launcher.core.jobs import JobHandle, JobRunner
from dev_task_launcher.core.models import Task
from dev_task_launcher.core.provider import TaskProvider
from dev_task_launcher.core.selector import Selector


class FakeProvider(TaskProvider):
    """Provider returning a fixed task list (or failing on demand)."""

    def __init__(self, tasks: list[Task] | None = None, name: str = "fake"):
        self.tasks = list(tasks or [])
        self.name = name
        self.fail = False
        self.discover_calls = 0
        self.invalidated: list[Path] = []

    def discover(self, project_root: Path) -> list[Task]:
        self.discover_calls += 1
        if self.fail:
            raise DiscoveryFailure(f"{self.name} exploded")
        return list(self.tasks)

    def invalidate(self, project_root: Path) -> None:
        self.invalidated.append(project_root)

    def get_metadata(self) -> dict:
        return {"name": self.name, "version": "0.0.1", "description": "Fake tasks"}


class FakeJob(JobHandle):
    """Job that never runs anything; state is flipped by the test."""

    def __init__(self, command: str, directory: Path):
        self.command = command
        self.directory = directory
        self.running = True
        self.terminated = False
        self.fail_terminate = False
        self._lines = [f"$ {command}"]

    def is_running(self) -> bool:
        return self.running

    def terminate(self) -> None:
        if self.fail_terminate:
            raise OSError("operation not permitted")
        self.terminated = True
        self.running = False

    def wait(self, timeout=None):
        self.running = False
        return 0

    def iter_lines(self):
        yield from list(self._lines)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)


class FakeJobRunner(JobRunner):
    """Records spawned commands instead of running them."""

    def __init__(self):
        self.spawned: list[FakeJob] = []
        self.fail = False

    def spawn(self, command: str, directory: Path) -> FakeJob:
        if self.fail:
            raise SpawnFailure(f"Could not start '{command}'")
        job = FakeJob(command, directory)
        self.spawned.append(job)
        return job


class ScriptedSelector(Selector):
    """Selector that picks a preset (action, index) and records what it saw."""

    def __init__(self, action=None, index: int = 0):
        self.action = action
        self.index = index
        self.seen: list = []
        self.cancel = False

    def select(self, candidates, actions, default_action):
        self.seen = list(candidates)
        if self.cancel or not candidates:
            return None
        return (self.action or default_action), candidates[self.index]


class GatedProvider(TaskProvider):
    """
    Provider whose first discovery blocks until released.

    Later discoveries return immediately, which lets tests overtake an
    in-flight discovery with a newer one.
    """

    def __init__(self, first: list[Task], later: list[Task]):
        self.first = first
        self.later = later
        self.started = threading.Event()
        self.release = threading.Event()
        self._calls = 0
        self._lock = threading.Lock()

    def discover(self, project_root: Path) -> list[Task]:
        with self._lock:
            self._calls += 1
            call = self._calls
        if call == 1:
            self.started.set()
            self.release.wait(timeout=5)
            return list(self.first)
        return list(self.later)

    def get_metadata(self) -> dict:
        return {"name": "gated", "version": "0.0.1", "description": "Gated tasks"}


def make_task(task_id: str, command: str | None = None) -> Task:
    return Task(id=task_id, label=task_id, command=command or f"make {task_id}", provider="make")


@pytest.fixture
def make_tasks():
    """Build + test tasks of a Makefile project."""
    return [make_task("build"), make_task("test")]


@pytest.fixture
def fake_provider(make_tasks):
    return FakeProvider(make_tasks)


@pytest.fixture
def fake_job_runner():
    return FakeJobRunner()


@pytest.fixture
def project_dir(tmp_path):
    """Empty project marked by a .git directory."""
    (tmp_path / ".git").mkdir()
    return tmp_path.resolve()


@pytest.fixture
def npm_project(tmp_path):
    """Package with a few ordinary scripts."""
    pkg = tmp_path / "package.json"
    pkg.write_text(
        json.dumps({
            "name": "clean-pkg",
            "version": "1.0.0",
            "scripts": {"build": "tsc", "test": "jest", "lint": "eslint ."},
        })
    )
    return tmp_path


@pytest.fixture
def npm_monorepo(tmp_path):
    """Monorepo with multiple package.json files."""
    root_pkg = tmp_path / "package.json"
    root_pkg.write_text(
        json.dumps({"name": "monorepo", "workspaces": ["packages/*"], "scripts": {"bootstrap": "lerna bootstrap"}})
    )

    pkg1_dir = tmp_path / "packages" / "pkg1"
    pkg1_dir.mkdir(parents=True)
    (pkg1_dir / "package.json").write_text(
        json.dumps({"name": "pkg1", "scripts": {"test": "jest"}})
    )

    pkg2_dir = tmp_path / "packages" / "pkg2"
    pkg2_dir.mkdir(parents=True)
    (pkg2_dir / "package.json").write_text(
        json.dumps({"name": "pkg2", "scripts": {"build": "tsc -b"}})
    )

    deps = tmp_path / "node_modules" / "left-pad"
    deps.mkdir(parents=True)
    (deps / "package.json").write_text(
        json.dumps({"name": "left-pad", "scripts": {"postinstall": "node install.js"}})
    )

    return tmp_path


@pytest.fixture
def malformed_package_json(tmp_path):
    """Package.json with invalid JSON."""
    pkg = tmp_path / "package.json"
    pkg.write_text('{"name": "broken", "scripts": {')
    return tmp_path


@pytest.fixture
def vscode_tasks(tmp_path):
    """Ordinary VS Code tasks."""
    vscode_dir = tmp_path / ".vscode"
    vscode_dir.mkdir()
    (vscode_dir / "tasks.json").write_text(
        json.dumps({
            "version": "2.0.0",
            "tasks": [
                {"label": "build", "type": "shell", "command": "npm run build"},
                {"label": "serve", "type": "shell", "command": "python", "args": ["-m", "http.server", "8000"]},
                {"label": "all", "dependsOn": ["build", "serve"]},
            ],
        })
    )
    return tmp_path


@pytest.fixture
def vscode_tasks_with_comments(tmp_path):
    """VS Code tasks.json with JSONC comments."""
    vscode_dir = tmp_path / ".vscode"
    vscode_dir.mkdir()
    (vscode_dir / "tasks.json").write_text(
        '''
        {
            // Configuration version
            "version": "2.0.0",
            /* Task definitions */
            "tasks": [
                {
                    "label": "docs", // Open docs
                    "command": "open https://example.com/docs"
                }
            ]
        }
        '''
    )
    return tmp_path
