"""Application root coordinating project resolution, selection and execution."""

import logging
from pathlib import Path
from typing import Optional

from .catalog import TaskCatalog
from .dispatcher import SelectionDispatcher
from .jobs import JobRunner
from .models import Candidate, DispatchMode, WorkingContext
from .project import ProjectResolver
from .provider import TaskProvider
from .register import LastRunRegister
from .runner import ExecutionRunner
from .selector import Selector
from .sinks import Sink, SinkRegistry

logger = logging.getLogger(__name__)


class TaskLauncher:
    """
    Owns the per-process launcher state and exposes the user commands.

    One instance holds the task catalog, the last-run register and the sink
    registry; every command goes through it so that state is shared between
    commands of the same session.
    """

    ACTIONS = list(DispatchMode)
    DEFAULT_ACTION = DispatchMode.ROOT

    def __init__(
        self,
        resolver: ProjectResolver,
        provider: TaskProvider,
        job_runner: JobRunner,
        selector: Selector,
        dispatcher: SelectionDispatcher | None = None,
        discovery_workers: int = 2,
    ):
        self.resolver = resolver
        self.provider = provider
        self.selector = selector
        self.dispatcher = dispatcher or SelectionDispatcher()
        self.catalog = TaskCatalog(provider, max_workers=discovery_workers)
        self.register = LastRunRegister()
        self.sinks = SinkRegistry()
        self.runner = ExecutionRunner(job_runner, self.sinks, self.register)

    def select_task(self, context: WorkingContext, refresh: bool = False) -> Optional[Sink]:
        """
        Offer the project's tasks and run the chosen one.

        Args:
            context: Where the command was invoked from
            refresh: Rediscover tasks before offering them

        Returns:
            Sink of the started (or reused) job, or None when the user
            cancelled or the chosen mode had nothing to run

        Raises:
            NoProjectError: If the context is not in a project
            DiscoveryFailure: If tasks could not be discovered
            SpawnFailure: If the chosen task could not be started
        """
        project_root = self.resolver.resolve(context)
        if refresh:
            tasks = self.catalog.refresh_and_get(project_root)
        else:
            tasks = self.catalog.get(project_root)

        candidates = [Candidate(label=task.label, task=task) for task in tasks]
        choice = self.selector.select(candidates, self.ACTIONS, self.DEFAULT_ACTION)
        if choice is None:
            return None

        mode, candidate = choice
        request = self.dispatcher.dispatch(candidate.task, mode, project_root, context)
        if request is None:
            return None

        logger.info(f"Running {request.task_id} ({mode.action}) in {request.directory}")
        return self.runner.run(request, project_root)

    def refresh_and_select(self, context: WorkingContext) -> Optional[Sink]:
        """Rediscover the project's tasks, then behave like select_task."""
        return self.select_task(context, refresh=True)

    def rerun_last(self, context: WorkingContext) -> Sink:
        """
        Re-run the project's last dispatched request.

        Raises:
            NoProjectError: If the context is not in a project
            NoPriorRunError: If nothing ran in the project yet
        """
        project_root = self.resolver.resolve(context)
        return self.runner.rerun(project_root)

    def list_sinks(self) -> list[Sink]:
        return self.sinks.list()

    def focus_sink(self, name: str) -> Sink:
        return self.sinks.focus(name)

    def kill_sink(self, name: str) -> None:
        self.sinks.kill(name)

    def kill_all_sinks(self) -> int:
        return self.sinks.kill_all()

    def close_project(self, project_root: Path) -> None:
        """Forget the catalog of a project. Last runs and sinks are kept."""
        self.catalog.forget(project_root)

    def close(self) -> None:
        self.catalog.close()
