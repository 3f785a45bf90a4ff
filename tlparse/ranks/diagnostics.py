from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

COMPILE_ID_DIVERGENCE = "compile_id_divergence"
DESYNC_SUSPECTED = "desync_suspected"


@dataclass
class RankResult:
    """What one processed rank contributes to the landing page."""
    rank: int
    path: Path
    compile_ids: List[str] = field(default_factory=list)
    unit_keys: List[str] = field(default_factory=list)
    has_vllm_artifacts: bool = False
    stats: Dict[str, int] = field(default_factory=dict)


def correlate_ranks(results: List[RankResult]) -> Dict[str, bool]:
    """
    Cross-rank flags. Compile-id divergence wins over desync: subgraph
    ranges are only compared when every rank saw the same compile ids.
    """
    if len(results) < 2:
        return {COMPILE_ID_DIVERGENCE: False, DESYNC_SUSPECTED: False}

    compile_sequences = {tuple(r.compile_ids) for r in results}
    unit_sequences = {tuple(r.unit_keys) for r in results}
    divergence = len(compile_sequences) > 1
    return {
        COMPILE_ID_DIVERGENCE: divergence,
        DESYNC_SUSPECTED: not divergence and len(unit_sequences) > 1,
    }
