"""Last-run register: one replay slot per project."""

import threading
from pathlib import Path

from .errors import NoPriorRunError
from .models import ExecutionRequest, LastRunEntry


class LastRunRegister:
    """Holds the most recent dispatch of each project (last writer wins)."""

    def __init__(self):
        self._entries: dict[Path, LastRunEntry] = {}
        self._lock = threading.Lock()

    def record(self, project_root: Path, request: ExecutionRequest) -> LastRunEntry:
        entry = LastRunEntry(
            project_root=project_root, request=request, command_line=request.command
        )
        with self._lock:
            self._entries[project_root] = entry
        return entry

    def get(self, project_root: Path) -> LastRunEntry | None:
        with self._lock:
            return self._entries.get(project_root)

    def last_request(self, project_root: Path) -> ExecutionRequest:
        """
        Return the stored request for replay.

        Raises:
            NoPriorRunError: If nothing was dispatched in this project yet
        """
        entry = self.get(project_root)
        if entry is None:
            raise NoPriorRunError(f"No task has been run in {project_root} yet")
        return entry.request
