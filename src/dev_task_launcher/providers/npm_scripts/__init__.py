"""npm scripts task provider."""

from .provider import NpmScriptsProvider

# Provider class exposed for registry discovery
PROVIDER_CLASS = NpmScriptsProvider

__all__ = ["NpmScriptsProvider", "PROVIDER_CLASS"]
