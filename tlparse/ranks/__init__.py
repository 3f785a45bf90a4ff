from tlparse.ranks.discovery import RankDescriptor, discover_rank_logs, parse_rank_number
from tlparse.ranks.diagnostics import RankResult, correlate_ranks
from tlparse.ranks.orchestrator import (
    setup_output_directory, process_rank, handle_one_rank, handle_all_ranks,
    build_multi_rank_context
)

__all__ = [
    "RankDescriptor", "discover_rank_logs", "parse_rank_number",
    "RankResult", "correlate_ranks",
    "setup_output_directory", "process_rank", "handle_one_rank", "handle_all_ranks",
    "build_multi_rank_context",
]
