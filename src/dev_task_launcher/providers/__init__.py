"""Built-in task providers."""
