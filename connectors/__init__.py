"""Connector implementations."""

from connectors.local_files import HtmlFileDiscoverStage

__all__ = ["HtmlFileDiscoverStage"]
