"""Dev Task Launcher - pick a project task and run it."""

__version__ = "0.1.0"
