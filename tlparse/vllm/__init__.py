"""
vLLM-specific parsing and reporting: piecewise compilation, subgraph
tracking and the compilation config snapshot.
"""
from tlparse.vllm.types import (
    ArtifactInfo, VllmCompilationConfig, VllmSubgraphInfo,
    VllmSubgraphWithArtifacts, VllmCompileRangeGroup, VllmSummaryContext
)
from tlparse.vllm.state import VllmState, SetConfig, PushUnit
from tlparse.vllm.parsers import (
    VllmCompilationConfigParser, VllmPiecewiseSplitGraphParser,
    VllmPiecewiseCompileParser, vllm_parsers
)
from tlparse.vllm.report import build_summary_context, render_summary_html, render_summary_text

__all__ = [
    "ArtifactInfo", "VllmCompilationConfig", "VllmSubgraphInfo",
    "VllmSubgraphWithArtifacts", "VllmCompileRangeGroup", "VllmSummaryContext",
    "VllmState", "SetConfig", "PushUnit",
    "VllmCompilationConfigParser", "VllmPiecewiseSplitGraphParser",
    "VllmPiecewiseCompileParser", "vllm_parsers",
    "build_summary_context", "render_summary_html", "render_summary_text",
]
