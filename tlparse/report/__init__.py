"""
Report pages that are not specific to one compiler backend:
the generic compile directory index and the multi-rank landing page.
"""
from tlparse.report.index import (
    CompileDirectory, CompileDirectoryEntry, IndexContext,
    build_index_context, render_compile_index
)
from tlparse.report.landing import MultiRankContext, RankSummary, render_landing

__all__ = [
    "CompileDirectory", "CompileDirectoryEntry", "IndexContext",
    "build_index_context", "render_compile_index",
    "MultiRankContext", "RankSummary", "render_landing",
]
