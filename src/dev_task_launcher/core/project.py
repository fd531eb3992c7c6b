"""Project identification and resolution."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from .errors import NoProjectError
from .models import WorkingContext

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_MARKERS = [".git", ".hg", ".svn", ".project", "package.json", "Makefile"]

# Interactive "switch project" flow: returns a chosen directory or None
ProjectSwitcher = Callable[[], Optional[Path]]


class ProjectLocator(ABC):
    """Finds the project a path belongs to."""

    @abstractmethod
    def current_project_root(self, path: Path) -> Optional[Path]:
        """Return the root of the project containing path, or None."""
        ...


class MarkerProjectLocator(ProjectLocator):
    """
    Locates projects by walking up to the nearest directory with a marker.

    Markers are checked per directory in configuration order, closest
    directory first, so a nested package.json wins over an outer .git.
    """

    def __init__(self, markers: list[str] | None = None):
        self.markers = markers or list(DEFAULT_PROJECT_MARKERS)

    def current_project_root(self, path: Path) -> Optional[Path]:
        path = path.expanduser().resolve()
        start = path if path.is_dir() else path.parent
        for directory in (start, *start.parents):
            for marker in self.markers:
                if (directory / marker).exists():
                    logger.debug(f"Found {marker} in {directory}")
                    return directory
        return None


class ProjectResolver:
    """Resolves working contexts to project roots."""

    def __init__(self, locator: ProjectLocator, switcher: ProjectSwitcher | None = None):
        self.locator = locator
        self.switcher = switcher

    def resolve(self, context: WorkingContext) -> Path:
        """
        Resolve the project root of context.

        When no project contains the context, the switch-project flow (if
        any) is offered once and the chosen directory is resolved instead.

        Raises:
            NoProjectError: If no project was found or selected
        """
        path = context.file if context.file is not None else context.directory
        root = self.locator.current_project_root(path)
        if root is not None:
            return root

        if self.switcher is None:
            raise NoProjectError(f"Not in a project: {path}")

        chosen = self.switcher()
        if chosen is None:
            raise NoProjectError("No project selected")

        root = self.locator.current_project_root(chosen)
        if root is None:
            raise NoProjectError(f"Not a project: {chosen}")
        return root
