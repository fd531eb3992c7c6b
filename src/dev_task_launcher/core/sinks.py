"""Output sinks and the registry that tracks them."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .errors import SinkKillError
from .jobs import JobHandle

logger = logging.getLogger(__name__)


def sink_name(project_root: Path, task_id: str) -> str:
    """Addressable name for the sink of task_id in project_root."""
    return f"*task:{project_root.name or project_root}:{task_id}*"


@dataclass
class Sink:
    """
    Named output destination of one job.

    Attributes:
        name: Registry key, scoped to (project, task)
        project_root: Project the task belongs to
        task_id: Task the job runs
        command: Command line the job runs
        job: Handle of the background job
        started_at: When the job was spawned
        directory: Working directory the job was started in
    """

    name: str
    project_root: Path
    task_id: str
    command: str
    job: JobHandle
    started_at: datetime = field(default_factory=datetime.now)
    directory: Path | None = None

    @property
    def running(self) -> bool:
        return self.job.is_running()

    @property
    def output(self) -> list[str]:
        return self.job.lines


class SinkRegistry:
    """
    Tracks live sinks for enumeration and lifecycle commands.

    The registry does not own the jobs; it only maps names to the sinks the
    execution runner created.
    """

    def __init__(self):
        self._sinks: dict[str, Sink] = {}
        self._lock = threading.Lock()

    def add(self, sink: Sink) -> None:
        with self._lock:
            # Re-adding moves the name to the end of the creation order
            self._sinks.pop(sink.name, None)
            self._sinks[sink.name] = sink

    def get(self, name: str) -> Sink | None:
        with self._lock:
            return self._sinks.get(name)

    def list(self) -> list[Sink]:
        """Return sinks in creation order (empty list when there are none)."""
        with self._lock:
            return list(self._sinks.values())

    def focus(self, name: str) -> Sink:
        """
        Look up a sink to display it.

        Raises:
            KeyError: If no sink has that name
        """
        sink = self.get(name)
        if sink is None:
            raise KeyError(name)
        return sink

    def kill(self, name: str) -> None:
        """
        Terminate a sink's job and drop it from the registry.

        Raises:
            KeyError: If no sink has that name
            SinkKillError: If the job could not be terminated (sink is kept)
        """
        sink = self.focus(name)
        try:
            sink.job.terminate()
        except OSError as e:
            raise SinkKillError(name, str(e)) from e

        with self._lock:
            if self._sinks.get(name) is sink:
                del self._sinks[name]
        logger.info(f"Killed {name}")

    def kill_all(self) -> int:
        """
        Kill every sink in creation order, stopping at the first failure.

        Sinks from the failing one onwards stay registered and untouched.

        Returns:
            Number of sinks killed

        Raises:
            SinkKillError: For the first sink that could not be killed
        """
        killed = 0
        for sink in self.list():
            self.kill(sink.name)
            killed += 1
        return killed

    def __len__(self) -> int:
        with self._lock:
            return len(self._sinks)
