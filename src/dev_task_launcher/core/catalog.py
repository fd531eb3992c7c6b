"""Per-project task catalog with superseding refreshes."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from .errors import DiscoveryFailure
from .models import Task
from .provider import TaskProvider

logger = logging.getLogger(__name__)


class TaskCatalog:
    """
    Caches discovered tasks per project root.

    Every refresh bumps the project's generation. A discovery only writes
    its result if its generation is still current when it completes, so a
    newer refresh supersedes an in-flight one instead of queueing behind it.
    A failed discovery leaves the previous cache in place.
    """

    def __init__(self, provider: TaskProvider, max_workers: int = 2):
        self.provider = provider
        self._cache: dict[Path, list[Task]] = {}
        self._generations: dict[Path, int] = {}
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="discovery")

    def get(self, project_root: Path) -> list[Task]:
        """
        Return the cached tasks of project_root, discovering on a cold cache.

        Raises:
            DiscoveryFailure: If the cold-start discovery failed
        """
        with self._lock:
            cached = self._cache.get(project_root)
            if cached is not None:
                return list(cached)
            generation = self._generations.get(project_root, 0)

        tasks = self._discover(project_root, generation)
        with self._lock:
            return list(self._cache.get(project_root, tasks))

    def refresh(self, project_root: Path) -> "Future[list[Task]]":
        """
        Invalidate provider caches and start a new discovery.

        Returns:
            Future resolving to the discovered tasks (or raising
            DiscoveryFailure). A superseded discovery still resolves, but its
            result never reaches the cache.
        """
        self.provider.invalidate(project_root)
        with self._lock:
            generation = self._generations.get(project_root, 0) + 1
            self._generations[project_root] = generation
        logger.info(f"Refreshing tasks for {project_root} (generation {generation})")
        return self._executor.submit(self._discover, project_root, generation)

    def refresh_and_get(self, project_root: Path) -> list[Task]:
        """
        Refresh and wait for the result.

        Raises:
            DiscoveryFailure: If the discovery failed (cache unchanged)
        """
        self.refresh(project_root).result()
        return self.get(project_root)

    def forget(self, project_root: Path) -> None:
        """Discard the catalog of a closed project (drops in-flight results)."""
        with self._lock:
            self._cache.pop(project_root, None)
            self._generations[project_root] = self._generations.get(project_root, 0) + 1
        self.provider.invalidate(project_root)

    def is_cached(self, project_root: Path) -> bool:
        with self._lock:
            return project_root in self._cache

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _discover(self, project_root: Path, generation: int) -> list[Task]:
        try:
            tasks = list(self.provider.discover(project_root))
        except DiscoveryFailure:
            logger.warning(f"Discovery failed for {project_root}, keeping previous tasks")
            raise
        except Exception as e:
            logger.warning(f"Discovery failed for {project_root}, keeping previous tasks")
            raise DiscoveryFailure(f"Task discovery failed for {project_root}: {e}") from e

        with self._lock:
            if self._generations.get(project_root, 0) != generation:
                logger.debug(f"Discarding superseded discovery for {project_root}")
                return tasks
            self._cache[project_root] = tasks
        logger.info(f"Discovered {len(tasks)} task(s) in {project_root}")
        return list(tasks)
