"""
Record extractors and the ordered registry that dispatches to them.
"""
from tlparse.parsers.base import (
    Metadata, PayloadFile, PayloadReformatFile, NoOutput, ParserOutput,
    Intent, StructuredLogParser, build_file_path
)
from tlparse.parsers.registry import ParserRegistry, DispatchResult
from tlparse.parsers.generic import ArtifactParser, GraphDumpParser

__all__ = [
    "Metadata", "PayloadFile", "PayloadReformatFile", "NoOutput", "ParserOutput",
    "Intent", "StructuredLogParser", "build_file_path",
    "ParserRegistry", "DispatchResult",
    "ArtifactParser", "GraphDumpParser",
]
