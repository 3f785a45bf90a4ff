"""
tlparse: structured trace log parser and report generator.
"""
from typing import TYPE_CHECKING

from tlparse.config import ParseConfig

# Lazy import
if TYPE_CHECKING:
    from tlparse.pipeline import ParseResult, parse_lines, parse_path
    from tlparse.ranks.orchestrator import handle_all_ranks

_PIPELINE_NAMES = ("ParseResult", "parse_lines", "parse_path")


def __getattr__(name: str):
    if name in _PIPELINE_NAMES:
        from tlparse import pipeline
        return getattr(pipeline, name)
    if name == "handle_all_ranks":
        from tlparse.ranks.orchestrator import handle_all_ranks
        return handle_all_ranks
    raise AttributeError(f"module {__name__} has no attribute {name}")


__all__ = ["ParseConfig", "ParseResult", "parse_lines", "parse_path", "handle_all_ranks"]
