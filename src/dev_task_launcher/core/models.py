"""Core data models for Dev Task Launcher."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class DirectoryMode(str, Enum):
    """Where a dispatched task runs."""

    ROOT = "root"  # Project root, regardless of the caller's context
    CURRENT_DIR = "current-dir"  # Directory of the file backing the context


class ArgsMode(str, Enum):
    """Whether extra arguments are collected at dispatch time."""

    NONE = "none"
    PROMPT = "prompt"


class DispatchMode(Enum):
    """
    The four ways a selected task can be dispatched.

    Each member carries its (directory, args) pair. The member values double
    as the action names offered by the interactive selector.
    """

    ROOT = ("run", DirectoryMode.ROOT, ArgsMode.NONE)
    ROOT_WITH_ARGS = ("run-with-args", DirectoryMode.ROOT, ArgsMode.PROMPT)
    CURRENT_DIR = ("run-in-current-dir", DirectoryMode.CURRENT_DIR, ArgsMode.NONE)
    CURRENT_DIR_WITH_ARGS = (
        "run-in-current-dir-with-args",
        DirectoryMode.CURRENT_DIR,
        ArgsMode.PROMPT,
    )

    def __init__(self, action: str, directory: DirectoryMode, args: ArgsMode):
        self.action = action
        self.directory = directory
        self.args = args

    @classmethod
    def from_action(cls, action: str) -> "DispatchMode":
        """Look up a mode by its selector action name."""
        for mode in cls:
            if mode.action == action:
                return mode
        raise ValueError(f"Unknown dispatch action: {action}")


class Task(BaseModel):
    """
    A runnable target discovered by a task provider.

    Tasks are immutable once discovered; a catalog refresh replaces them
    wholesale rather than updating them in place.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identifier, unique within a project catalog")
    label: str = Field(..., description="Human-readable label shown in the selector")
    command: str = Field(..., description="Shell command that runs the task")
    directory: Optional[Path] = Field(
        None, description="Directory the task was declared in (informational)"
    )
    provider: str = Field("unknown", description="Provider that discovered the task")

    @field_serializer("directory")
    def serialize_path(self, path: Optional[Path]) -> Optional[str]:
        """Serialize Path to string for JSON output."""
        return str(path) if path is not None else None

    @field_validator("directory", mode="before")
    @classmethod
    def validate_path(cls, v):
        """Convert string to Path if needed."""
        if isinstance(v, str):
            return Path(v)
        return v


class ExecutionRequest(BaseModel):
    """
    A fully resolved request to run one task.

    Built by the dispatcher, consumed by the execution runner, and stored
    verbatim in the last-run register for replay.
    """

    model_config = ConfigDict(frozen=True)

    task_id: str = Field(..., description="Identifier of the task to run")
    directory: Path = Field(..., description="Working directory for the job")
    args: Optional[str] = Field(None, description="Extra arguments, if any")
    command: str = Field(..., description="Command line with args appended")

    @classmethod
    def build(
        cls, task: Task, directory: Path, args: Optional[str] = None
    ) -> "ExecutionRequest":
        """
        Create a request for task, appending args to its command.

        Args:
            task: Task being dispatched
            directory: Resolved working directory
            args: Extra arguments (blank values are treated as none)

        Returns:
            ExecutionRequest with the final command line
        """
        args = (args or "").strip() or None
        command = f"{task.command} {args}" if args else task.command
        return cls(task_id=task.id, directory=directory, args=args, command=command)

    @field_validator("directory", mode="before")
    @classmethod
    def validate_path(cls, v):
        """Convert string to Path if needed."""
        if isinstance(v, str):
            return Path(v)
        return v


class LastRunEntry(BaseModel):
    """Most recent dispatch for a project."""

    model_config = ConfigDict(frozen=True)

    project_root: Path
    request: ExecutionRequest
    command_line: str


@dataclass(frozen=True)
class WorkingContext:
    """
    Where a command was invoked from.

    Attributes:
        directory: Current working directory
        file: File backing the context, if any (an editor's visited file)
    """

    directory: Path
    file: Optional[Path] = None


@dataclass(frozen=True)
class Candidate:
    """A labeled selector entry bound to a task."""

    label: str
    task: Task
