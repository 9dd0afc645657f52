"""Source artifact scanner package."""

from retention_analyzer.scanner.fact_extractor import extract_facts
from retention_analyzer.scanner.file_discovery import FileDiscovery
from retention_analyzer.scanner.source_reader import JavaSourceReader

__all__ = [
    "FileDiscovery",
    "JavaSourceReader",
    "extract_facts",
]
