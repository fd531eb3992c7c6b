"""Job execution interface and the subprocess-backed implementation."""

import logging
import os
import signal
import subprocess
import threading
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterator
from pathlib import Path
from typing import Optional

from .errors import SpawnFailure

logger = logging.getLogger(__name__)


class JobHandle(ABC):
    """A running (or finished) background job."""

    @abstractmethod
    def is_running(self) -> bool:
        ...

    @abstractmethod
    def terminate(self) -> None:
        """Stop the job. Raises OSError if the job cannot be signalled."""
        ...

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Block until the job exits and return its exit code (None on timeout)."""
        ...

    @abstractmethod
    def iter_lines(self) -> Iterator[str]:
        """
        Yield output lines as they arrive, starting from the first line.

        The iterator ends once the job has exited and all output was read.
        """
        ...

    @property
    @abstractmethod
    def lines(self) -> list[str]:
        """Output captured so far."""
        ...


class JobRunner(ABC):
    """Starts jobs for the execution runner."""

    @abstractmethod
    def spawn(self, command: str, directory: Path) -> JobHandle:
        """
        Start command in directory.

        Raises:
            SpawnFailure: If the job could not be started
        """
        ...


class SubprocessJob(JobHandle):
    """
    Shell command running under subprocess.Popen.

    Merged stdout/stderr is read by a daemon thread into a bounded buffer;
    readers wait on a condition for new lines.
    """

    def __init__(self, process: subprocess.Popen, max_lines: int = 10000):
        self.process = process
        self._buffer: deque[str] = deque(maxlen=max_lines)
        self._dropped = 0
        self._done = False
        self._cond = threading.Condition()
        self._reader = threading.Thread(target=self._read_output, daemon=True)
        self._reader.start()

    def _read_output(self) -> None:
        try:
            for line in self.process.stdout:
                with self._cond:
                    if len(self._buffer) == self._buffer.maxlen:
                        self._dropped += 1
                    self._buffer.append(line.rstrip("\n"))
                    self._cond.notify_all()
        finally:
            self.process.stdout.close()
            self.process.wait()
            with self._cond:
                self._done = True
                self._cond.notify_all()

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self.process.returncode

    def is_running(self) -> bool:
        return self.process.poll() is None

    def terminate(self) -> None:
        if not self.is_running():
            return
        try:
            # The job leads its own session; stop its children too
            os.killpg(self.process.pid, signal.SIGTERM)
        except ProcessLookupError:
            pass

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        try:
            return self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return None

    @property
    def lines(self) -> list[str]:
        with self._cond:
            return list(self._buffer)

    def iter_lines(self) -> Iterator[str]:
        # Absolute position in the output stream, including dropped lines
        position = 0
        while True:
            with self._cond:
                while position >= self._dropped + len(self._buffer) and not self._done:
                    self._cond.wait()
                start = max(position - self._dropped, 0)
                pending = list(self._buffer)[start:]
                position = self._dropped + len(self._buffer)
                finished = self._done
            yield from pending
            if finished and not pending:
                return


class SubprocessJobRunner(JobRunner):
    """Runs commands through the user's shell."""

    def __init__(self, shell: str = "/bin/sh", max_lines: int = 10000):
        self.shell = shell
        self.max_lines = max_lines

    def spawn(self, command: str, directory: Path) -> SubprocessJob:
        if not directory.is_dir():
            raise SpawnFailure(f"Working directory does not exist: {directory}")

        try:
            process = subprocess.Popen(
                [self.shell, "-c", command],
                cwd=str(directory),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
                start_new_session=True,
            )
        except OSError as e:
            raise SpawnFailure(f"Could not start '{command}': {e}") from e

        logger.info(f"Started pid {process.pid}: {command} (in {directory})")
        return SubprocessJob(process, max_lines=self.max_lines)
