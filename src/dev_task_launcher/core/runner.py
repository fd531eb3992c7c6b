"""Execution runner: spawns jobs, registers sinks and records the last run."""

import logging
from pathlib import Path

from .errors import SpawnFailure
from .jobs import JobRunner
from .models import ExecutionRequest
from .register import LastRunRegister
from .sinks import Sink, SinkRegistry, sink_name

logger = logging.getLogger(__name__)


class ExecutionRunner:
    """
    Turns execution requests into running, tracked jobs.

    Duplicate policy: a request whose sink is still running the same command
    line in the same directory collapses onto that sink (nothing new is
    spawned). A running sink with another command line is killed and
    replaced; a finished sink is replaced by a fresh run.
    """

    def __init__(self, job_runner: JobRunner, sinks: SinkRegistry, register: LastRunRegister):
        self.job_runner = job_runner
        self.sinks = sinks
        self.register = register

    def run(self, request: ExecutionRequest, project_root: Path) -> Sink:
        """
        Run request as a background job.

        Args:
            request: Resolved request to execute
            project_root: Project owning the task (keys sink and last run)

        Returns:
            Sink receiving the job's output

        Raises:
            SpawnFailure: If the job could not be started (last run untouched)
            SinkKillError: If a running sink with another command line could
                not be stopped
        """
        name = sink_name(project_root, request.task_id)

        existing = self.sinks.get(name)
        if existing is not None and existing.running:
            if existing.command == request.command and existing.directory == request.directory:
                logger.info(f"{name} is already running, reusing it")
                self.register.record(project_root, request)
                return existing
            logger.info(f"{name} is running '{existing.command}', replacing it with '{request.command}'")
            self.sinks.kill(name)

        try:
            job = self.job_runner.spawn(request.command, request.directory)
        except SpawnFailure:
            raise
        except OSError as e:
            raise SpawnFailure(f"Could not start '{request.command}': {e}") from e

        sink = Sink(
            name=name,
            project_root=project_root,
            task_id=request.task_id,
            command=request.command,
            job=job,
            directory=request.directory,
        )
        self.sinks.add(sink)
        self.register.record(project_root, request)
        return sink

    def rerun(self, project_root: Path) -> Sink:
        """
        Re-run the last request of project_root verbatim.

        Raises:
            NoPriorRunError: If the project has no recorded run
            SpawnFailure: If the job could not be started
        """
        request = self.register.last_request(project_root)
        logger.info(f"Re-running {request.task_id} in {request.directory}")
        return self.run(request, project_root)
