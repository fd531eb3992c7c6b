"""VS Code tasks.json task provider."""

from .provider import VsCodeTasksProvider

# Provider class exposed for registry discovery
PROVIDER_CLASS = VsCodeTasksProvider

__all__ = ["VsCodeTasksProvider", "PROVIDER_CLASS"]
