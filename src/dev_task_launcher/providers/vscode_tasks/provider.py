"""Task provider for VS Code .vscode/tasks.json files."""

import json
import logging
import re
import shlex
import sys
from pathlib import Path

from ...core.errors import DiscoveryFailure
from ...core.models import Task
from ...core.provider import TaskProvider

logger = logging.getLogger(__name__)

PLATFORM_KEYS = {"linux": "linux", "darwin": "osx", "win32": "windows"}

# String literals are matched first so comment markers inside them survive
JSONC_TOKEN = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?(?:\*/|\Z)', re.DOTALL)


def strip_json_comments(content: str) -> str:
    """
    Remove // and /* */ comments from JSON content (JSONC format).

    VS Code allows comments in tasks.json, but the standard JSON parser
    doesn't. String boundaries are respected so URLs like https:// survive.
    An unterminated block comment runs to the end of the input.

    Args:
        content: JSONC content

    Returns:
        JSON content with comments removed
    """
    return JSONC_TOKEN.sub(lambda m: m.group() if m.group().startswith('"') else "", content)


class VsCodeTasksProvider(TaskProvider):
    """Discovers tasks declared in the project's .vscode/tasks.json."""

    def discover(self, project_root: Path) -> list[Task]:
        """
        Read .vscode/tasks.json under project_root.

        Raises:
            DiscoveryFailure: If tasks.json exists but is not valid JSONC
        """
        tasks_file = project_root / ".vscode" / "tasks.json"
        if not tasks_file.exists():
            return []

        try:
            with open(tasks_file, encoding="utf-8", errors="replace") as f:
                data = json.loads(strip_json_comments(f.read()))
        except json.JSONDecodeError as e:
            raise DiscoveryFailure(f"Malformed JSON in {tasks_file}: {e}") from e
        except OSError as e:
            raise DiscoveryFailure(f"Could not read {tasks_file}: {e}") from e

        entries = data.get("tasks", []) if isinstance(data, dict) else []
        if not isinstance(entries, list):
            return []

        tasks = []
        seen = set()
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            task = self._build_task(entry, project_root)
            if task is None:
                continue
            if task.id in seen:
                logger.warning(f"Duplicate task label '{task.id}' in {tasks_file}, keeping the first")
                continue
            seen.add(task.id)
            tasks.append(task)

        return tasks

    def _build_task(self, entry: dict, root: Path) -> Task | None:
        """
        Convert one tasks.json entry into a Task.

        Handles shell/process tasks (command + args, with platform-specific
        overrides), npm tasks (script) and options.cwd. Entries with nothing
        to run (compound dependsOn-only tasks) are skipped.
        """
        label = entry.get("label") or entry.get("script") or entry.get("command")
        if not isinstance(label, str) or not label:
            return None

        # Platform-specific block (osx, linux, windows) overrides the top level
        platform_config = entry.get(PLATFORM_KEYS.get(sys.platform, ""), {})
        if not isinstance(platform_config, dict):
            platform_config = {}

        command = platform_config.get("command", entry.get("command"))
        args = platform_config.get("args", entry.get("args", []))

        if entry.get("type") == "npm" and isinstance(entry.get("script"), str):
            command = f"npm run {shlex.quote(entry['script'])}"
            args = []

        if isinstance(command, dict):
            # {"value": ..., "quoting": ...} form
            command = command.get("value")
        if not isinstance(command, str) or not command.strip():
            logger.debug(f"Skipping task '{label}': no command")
            return None

        parts = [command]
        for arg in args if isinstance(args, list) else []:
            if isinstance(arg, dict):
                arg = arg.get("value")
            if isinstance(arg, str):
                parts.append(shlex.quote(arg))
        command_line = " ".join(parts)

        directory = root
        options = entry.get("options", {})
        cwd = options.get("cwd") if isinstance(options, dict) else None
        if isinstance(cwd, str) and cwd:
            cwd = cwd.replace("${workspaceFolder}", str(root)).replace("${workspaceRoot}", str(root))
            directory = (root / cwd).resolve()
            command_line = f"cd {shlex.quote(str(directory))} && {command_line}"

        return Task(
            id=label,
            label=f"{label} ({command_line})" if label != command_line else label,
            command=command_line,
            directory=directory,
            provider="vscode-tasks",
        )

    def get_metadata(self) -> dict:
        """Return provider metadata."""
        return {
            "name": "vscode-tasks",
            "version": "0.1.0",
            "description": "Tasks declared in .vscode/tasks.json (JSONC accepted)",
        }
