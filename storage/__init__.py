"""Storage backends for serp-extractor."""

from storage.json_files import JsonFileExportStage

__all__ = ["JsonFileExportStage"]
