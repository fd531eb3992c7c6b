"""Terminal implementations of the interactive collaborators."""

from pathlib import Path
from typing import Optional

import click

from .core.models import Candidate, DispatchMode, Task
from .core.reporting import TextReporter
from .core.selector import Selector


class PromptSelector(Selector):
    """Numbered-table selector driven by click prompts."""

    def __init__(self, reporter: TextReporter | None = None):
        self.reporter = reporter or TextReporter()

    def select(
        self,
        candidates: list[Candidate],
        actions: list[DispatchMode],
        default_action: DispatchMode,
    ) -> Optional[tuple[DispatchMode, Candidate]]:
        if not candidates:
            self.reporter.info("No tasks found in this project")
            return None

        self.reporter.candidates(candidates)
        index = click.prompt(
            "Task number (0 to cancel)",
            type=click.IntRange(0, len(candidates)),
            default=1,
        )
        if index == 0:
            return None

        action = click.prompt(
            "Action",
            type=click.Choice([mode.action for mode in actions]),
            default=default_action.action,
        )
        return DispatchMode.from_action(action), candidates[index - 1]


def prompt_args(task: Task) -> Optional[str]:
    """Ask for extra arguments to append to task's command."""
    value = click.prompt(f"Arguments for {task.id}", default="", show_default=False)
    return value or None


def prompt_project() -> Optional[Path]:
    """Switch-project flow: ask for a project directory (empty cancels)."""
    value = click.prompt(
        "Not in a project. Project directory (empty to cancel)",
        default="",
        show_default=False,
    )
    return Path(value).expanduser() if value else None
