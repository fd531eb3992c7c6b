"""Launcher core: catalog, dispatch, execution and sink tracking."""
