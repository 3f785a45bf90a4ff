from typing import List, Optional

from pydantic import ValidationError

from tlparse.core.errors import StructuralDecodeError
from tlparse.core.serialization import pretty_json
from tlparse.core.types import CompileId, Record
from tlparse.parsers.base import (
    Intent, Metadata, ParserOutput, PayloadFile, PayloadReformatFile,
    StructuredLogParser, build_file_path
)
from tlparse.vllm.state import PushUnit, SetConfig
from tlparse.vllm.types import VllmCompilationConfig, VllmSubgraphInfo

CONFIG_ARTIFACT = "vllm_compilation_config"
COMPILE_START_ARTIFACT = "vllm_piecewise_compile_start"
SPLIT_GRAPH_DUMP = "vllm_piecewise_split_graph"
SUBGRAPH_DUMP_PREFIXES = ("vllm_subgraph_", "vllm_submod_")


class VllmCompilationConfigParser(StructuredLogParser):
    """
    vllm_compilation_config artifacts: stores the config for the summary
    and writes it out as indented JSON.
    """

    @property
    def name(self) -> str:
        return "vllm_compilation_config"

    def identify(self, record: Record) -> Optional[Metadata]:
        if record.artifact is not None and record.artifact.name == CONFIG_ARTIFACT:
            return Metadata.for_artifact(record)
        return None

    def extract(self, lineno: int, metadata: Metadata, rank: Optional[int],
                compile_id: Optional[CompileId], payload: str) -> List[ParserOutput]:
        f = build_file_path(f"{CONFIG_ARTIFACT}.json", lineno, compile_id)
        return [PayloadReformatFile(f, pretty_json)]

    def intents(self, metadata: Metadata, payload: str) -> List[Intent]:
        try:
            config = VllmCompilationConfig.model_validate_json(payload)
        except ValidationError as e:
            raise StructuralDecodeError(f"{CONFIG_ARTIFACT}: {e}") from e
        return [SetConfig(config)]


class VllmPiecewiseSplitGraphParser(StructuredLogParser):
    """vllm_piecewise_split_graph dumps; the state links the file from the summary."""
    marks_domain = True

    @property
    def name(self) -> str:
        return "vllm_piecewise_split_graph"

    def identify(self, record: Record) -> Optional[Metadata]:
        if record.graph_dump is not None and record.graph_dump.name == SPLIT_GRAPH_DUMP:
            return Metadata.for_graph_dump(record)
        return None

    def extract(self, lineno: int, metadata: Metadata, rank: Optional[int],
                compile_id: Optional[CompileId], payload: str) -> List[ParserOutput]:
        return [PayloadFile(build_file_path(f"{SPLIT_GRAPH_DUMP}.txt", lineno, compile_id))]


class VllmPiecewiseCompileParser(StructuredLogParser):
    """
    vllm_piecewise_compile_start artifacts open a new subgraph; every later
    artifact attaches to it until the next one. vllm_subgraph_* / vllm_submod_*
    graph dumps are written out as text.
    """
    marks_domain = True

    @property
    def name(self) -> str:
        return "vllm_piecewise_compile"

    def identify(self, record: Record) -> Optional[Metadata]:
        if record.artifact is not None and record.artifact.name == COMPILE_START_ARTIFACT:
            return Metadata.for_artifact(record)
        if record.graph_dump is not None and record.graph_dump.name.startswith(SUBGRAPH_DUMP_PREFIXES):
            return Metadata.for_graph_dump(record)
        return None

    def extract(self, lineno: int, metadata: Metadata, rank: Optional[int],
                compile_id: Optional[CompileId], payload: str) -> List[ParserOutput]:
        if metadata.kind == "graph_dump":
            return [PayloadFile(build_file_path(f"{metadata.name}.txt", lineno, compile_id))]
        return []

    def intents(self, metadata: Metadata, payload: str) -> List[Intent]:
        if metadata.kind != "artifact":
            return []
        try:
            info = VllmSubgraphInfo.model_validate_json(payload)
        except ValidationError as e:
            raise StructuralDecodeError(f"{COMPILE_START_ARTIFACT}: {e}") from e
        return [PushUnit(info)]


def vllm_parsers() -> List[StructuredLogParser]:
    # Registration order is part of the dispatch contract
    return [
        VllmCompilationConfigParser(),
        VllmPiecewiseSplitGraphParser(),
        VllmPiecewiseCompileParser(),
    ]
