"""Task provider interface and the composite provider used by the launcher."""

import importlib
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from .errors import DiscoveryFailure
from .models import Task

logger = logging.getLogger(__name__)


class TaskProvider(ABC):
    """
    Abstract base class for task discovery backends.

    A provider knows how to enumerate the tasks of one build tool (npm
    scripts, VS Code tasks, ...). The launcher treats providers as opaque:
    it only relies on discovery order being stable for the same inputs.
    """

    @abstractmethod
    def discover(self, project_root: Path) -> list[Task]:
        """
        Enumerate tasks defined under project_root.

        Should return partial results rather than raising on a single
        malformed file. Raise only when nothing could be enumerated at all.

        Args:
            project_root: Root directory of the project

        Returns:
            Tasks in discovery order (may be empty)
        """
        ...

    @abstractmethod
    def get_metadata(self) -> dict:
        """
        Return provider metadata.

        Returns:
            Dictionary with keys:
            - name (str): Provider name (e.g., "npm-scripts")
            - version (str): Provider version
            - description (str): What the provider discovers
        """
        ...

    def cached_tasks(self, project_root: Path) -> list[Task] | None:
        """Return previously discovered tasks, or None if nothing is cached."""
        return None

    def invalidate(self, project_root: Path) -> None:
        """Drop anything cached for project_root."""


class CompositeTaskProvider(TaskProvider):
    """
    Runs a set of providers in order and concatenates their tasks.

    Registry order is discovery order, so tasks stay grouped by the tool
    that defines them. Task ids are prefixed with the provider name to keep
    them unique across providers.
    """

    # Provider registry (built-in providers)
    PROVIDER_REGISTRY = {
        "npm-scripts": "dev_task_launcher.providers.npm_scripts",
        "vscode-tasks": "dev_task_launcher.providers.vscode_tasks",
    }

    def __init__(self, providers: dict[str, TaskProvider] | None = None, names: list[str] | None = None):
        """
        Initialize with explicit providers, or load them from the registry.

        Args:
            providers: Mapping of name to provider instance (skips loading)
            names: Registry names to load (None = all registered)
        """
        self.providers: dict[str, TaskProvider] = {}
        self._cache: dict[Path, list[Task]] = {}
        self._lock = threading.Lock()
        if providers is not None:
            self.providers.update(providers)
        else:
            self._load_providers(names)

    def _load_providers(self, names: list[str] | None) -> None:
        """
        Load registered providers.

        Each provider module must expose a PROVIDER_CLASS variable pointing
        to the provider class.
        """
        for name, module_path in self.PROVIDER_REGISTRY.items():
            if names is not None and name not in names:
                continue
            try:
                module = importlib.import_module(module_path)
                provider_class = getattr(module, "PROVIDER_CLASS")
                self.providers[name] = provider_class()
                logger.info(f"Loaded provider: {name}")
            except Exception as e:
                logger.error(f"Failed to load provider {name}: {e}")
                # Continue loading other providers

        for name in names or []:
            if name not in self.PROVIDER_REGISTRY:
                logger.warning(f"Provider '{name}' not found, skipping")

    def discover(self, project_root: Path) -> list[Task]:
        """
        Run every provider against project_root.

        Raises:
            DiscoveryFailure: If providers are configured and all of them failed
        """
        tasks = []
        failures = []

        for name, provider in self.providers.items():
            try:
                found = provider.discover(project_root)
            except Exception as e:
                logger.error(f"Provider {name} failed: {e}")
                failures.append(f"{name}: {e}")
                continue

            for task in found:
                tasks.append(task.model_copy(update={"id": f"{name}:{task.id}", "provider": name}))
            logger.info(f"Provider {name} found {len(found)} task(s)")

        if self.providers and len(failures) == len(self.providers):
            raise DiscoveryFailure(
                f"Task discovery failed for {project_root}: {'; '.join(failures)}"
            )

        with self._lock:
            self._cache[project_root] = list(tasks)
        return tasks

    def cached_tasks(self, project_root: Path) -> list[Task] | None:
        with self._lock:
            cached = self._cache.get(project_root)
        return list(cached) if cached is not None else None

    def invalidate(self, project_root: Path) -> None:
        with self._lock:
            self._cache.pop(project_root, None)
        for provider in self.providers.values():
            provider.invalidate(project_root)

    def get_metadata(self) -> dict:
        return {
            "name": "composite",
            "version": "0.1.0",
            "description": f"Tasks from: {', '.join(self.providers) or 'no providers'}",
        }

    def list_providers(self) -> list[dict]:
        """
        Get metadata for all loaded providers.

        Returns:
            List of provider metadata dictionaries
        """
        return [provider.get_metadata() for provider in self.providers.values()]
