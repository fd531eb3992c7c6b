"""Exception types raised by the launcher core."""


class LauncherError(Exception):
    """Base class for user-visible launcher failures."""


class NoProjectError(LauncherError):
    """No project could be resolved and the user did not select one."""


class NoCandidateDirectoryError(LauncherError):
    """Current-directory dispatch requested from a context with no backing file."""


class DiscoveryFailure(LauncherError):
    """Task discovery could not enumerate tasks for a project."""


class SpawnFailure(LauncherError):
    """A task's job could not be started."""


class NoPriorRunError(LauncherError):
    """Rerun requested for a project with no recorded run."""


class SinkKillError(LauncherError):
    """A sink's job could not be terminated."""

    def __init__(self, sink_name: str, reason: str):
        super().__init__(f"Failed to kill {sink_name}: {reason}")
        self.sink_name = sink_name
