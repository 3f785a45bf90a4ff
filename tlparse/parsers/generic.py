from typing import List, Optional

from tlparse.core.serialization import pretty_json
from tlparse.core.types import CompileId, Record
from tlparse.parsers.base import (
    Metadata, NoOutput, ParserOutput, PayloadFile, PayloadReformatFile,
    StructuredLogParser, build_file_path
)

PROVENANCE_PREFIX = "inductor_provenance"


class GraphDumpParser(StructuredLogParser):
    """Fallback for graph dumps no domain parser claimed; writes <name>.txt."""

    @property
    def name(self) -> str:
        return "graph_dump"

    def identify(self, record: Record) -> Optional[Metadata]:
        if record.graph_dump is not None:
            return Metadata.for_graph_dump(record)
        return None

    def extract(self, lineno: int, metadata: Metadata, rank: Optional[int],
                compile_id: Optional[CompileId], payload: str) -> List[ParserOutput]:
        return [PayloadFile(build_file_path(f"{metadata.name}.txt", lineno, compile_id))]


class ArtifactParser(StructuredLogParser):
    """
    Fallback for named artifacts. JSON-encoded artifacts are re-indented,
    everything else is written verbatim. Provenance tracking artifacts are
    only written when provenance mode is on.
    """

    def __init__(self, include_provenance: bool = False):
        self.include_provenance = include_provenance

    @property
    def name(self) -> str:
        return "artifact"

    def identify(self, record: Record) -> Optional[Metadata]:
        if record.artifact is not None:
            return Metadata.for_artifact(record)
        return None

    def extract(self, lineno: int, metadata: Metadata, rank: Optional[int],
                compile_id: Optional[CompileId], payload: str) -> List[ParserOutput]:
        if metadata.name.startswith(PROVENANCE_PREFIX) and not self.include_provenance:
            return [NoOutput()]
        if metadata.encoding == "json":
            f = build_file_path(f"{metadata.name}.json", lineno, compile_id)
            return [PayloadReformatFile(f, pretty_json)]
        return [PayloadFile(build_file_path(f"{metadata.name}.txt", lineno, compile_id))]
