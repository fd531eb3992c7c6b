"""Task provider for npm package.json scripts."""

import json
import logging
import os
import shlex
from pathlib import Path

from ...core.models import Task
from ...core.provider import TaskProvider

logger = logging.getLogger(__name__)

# package.json files larger than this are skipped
MAX_MANIFEST_BYTES = 10 * 1024 * 1024


class NpmScriptsProvider(TaskProvider):
    """Discovers the scripts table of every package.json in a project."""

    def discover(self, project_root: Path) -> list[Task]:
        """
        Collect scripts from package.json files (supports monorepos).

        The root manifest comes first, nested workspace packages follow in
        path order. Scripts keep their declaration order within a manifest.

        Args:
            project_root: Root directory to search

        Returns:
            Tasks for every string-valued script found
        """
        tasks = []

        manifests = sorted(
            self._find_manifests(project_root),
            key=lambda p: (len(p.relative_to(project_root).parts), p.as_posix()),
        )
        for pkg_file in manifests:
            try:
                size = pkg_file.stat().st_size
            except OSError as e:
                logger.warning(f"Could not read {pkg_file}: {e}")
                continue

            if size > MAX_MANIFEST_BYTES:
                logger.warning(f"Skipping {pkg_file}: exceeds 10MB size limit")
                continue

            tasks.extend(self._read_package_json(pkg_file, project_root))

        return tasks

    def _find_manifests(self, project_root: Path) -> list[Path]:
        """Find package.json files without descending into node_modules."""
        found = []
        for dirpath, dirnames, filenames in os.walk(project_root):
            dirnames[:] = [d for d in dirnames if d != "node_modules"]
            if "package.json" in filenames:
                found.append(Path(dirpath) / "package.json")
        return found

    def _read_package_json(self, pkg_path: Path, root: Path) -> list[Task]:
        """
        Turn one package.json into tasks.

        Args:
            pkg_path: Path to package.json
            root: Project root (for ids and labels)

        Returns:
            Tasks from this manifest (empty if malformed or script-less)
        """
        try:
            with open(pkg_path, encoding="utf-8", errors="replace") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed JSON in {pkg_path}: {e}")
            return []
        except OSError as e:
            logger.warning(f"Could not read {pkg_path}: {e}")
            return []

        if not isinstance(data, dict):
            return []
        scripts = data.get("scripts", {})
        if not scripts or not isinstance(scripts, dict):
            return []

        package_dir = pkg_path.parent
        relative_dir = package_dir.relative_to(root).as_posix()
        nested = relative_dir != "."

        tasks = []
        for script_name, script_content in scripts.items():
            if not isinstance(script_content, str):
                continue

            if nested:
                # --prefix keeps the task pinned to its package wherever it runs
                command = f"npm --prefix {shlex.quote(str(package_dir))} run {shlex.quote(script_name)}"
                task_id = f"{relative_dir}:{script_name}"
                label = f"{relative_dir}: npm run {script_name}"
            else:
                command = f"npm run {shlex.quote(script_name)}"
                task_id = script_name
                label = f"npm run {script_name}"

            tasks.append(
                Task(
                    id=task_id,
                    label=label,
                    command=command,
                    directory=package_dir,
                    provider="npm-scripts",
                )
            )

        return tasks

    def get_metadata(self) -> dict:
        """Return provider metadata."""
        return {
            "name": "npm-scripts",
            "version": "0.1.0",
            "description": "Scripts declared in package.json files (workspaces included)",
        }
