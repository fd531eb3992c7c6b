"""Selection dispatcher: turns a chosen task and mode into a request."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from .models import ArgsMode, DirectoryMode, DispatchMode, ExecutionRequest, Task, WorkingContext

logger = logging.getLogger(__name__)

# Collects extra arguments for a task; None or "" means no arguments
ArgsPrompter = Callable[[Task], Optional[str]]


def _no_args(task: Task) -> Optional[str]:
    return None


class SelectionDispatcher:
    """Resolves (task, mode) pairs to execution requests."""

    def __init__(self, prompt_args: ArgsPrompter = _no_args):
        self.prompt_args = prompt_args

    def dispatch(
        self,
        task: Task,
        mode: DispatchMode,
        project_root: Path,
        context: WorkingContext,
    ) -> Optional[ExecutionRequest]:
        """
        Build the request for running task in mode.

        Args:
            task: Selected task
            mode: Selected dispatch mode
            project_root: Root of the task's project
            context: Context the selection was made from

        Returns:
            The request, or None for a current-directory mode invoked from a
            context without a backing file (nothing should run)
        """
        if mode.directory is DirectoryMode.ROOT:
            directory = project_root
        elif mode.directory is DirectoryMode.CURRENT_DIR:
            if context.file is None:
                logger.debug(f"No file backs the current context, skipping {task.id}")
                return None
            directory = context.file.parent
        else:
            raise ValueError(f"Unhandled directory mode: {mode.directory}")

        args = None
        if mode.args is ArgsMode.PROMPT:
            args = self.prompt_args(task)

        return ExecutionRequest.build(task, directory, args)
