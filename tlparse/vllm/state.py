from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, List, Optional

from tlparse.parsers.base import Intent
from tlparse.vllm.types import (
    ArtifactInfo, VllmCompilationConfig, VllmCompileRangeGroup,
    VllmSubgraphInfo, VllmSubgraphWithArtifacts
)

SPLIT_GRAPH_MARKER = "vllm_piecewise_split_graph"

DYNAMO_ARTIFACT_PREFIXES = (
    "dynamo_side_effects",
    "dynamo_output_graph",
    "dynamo_cpp_guards_str",
    "compilation_metrics",
)


class VllmState:
    """
    Per-run accumulator. One owner per run; parsers never touch it directly,
    they emit intents that the registry applies here in record order.
    """

    def __init__(self):
        self.config: Optional[VllmCompilationConfig] = None
        self.piecewise_graph_file: Optional[str] = None
        self.subgraphs: List[VllmSubgraphInfo] = []
        self.pre_subgraph_artifacts: List[ArtifactInfo] = []
        self.has_vllm_artifacts: bool = False

    def has_artifacts(self) -> bool:
        return self.has_vllm_artifacts

    def mark_observed(self) -> None:
        self.has_vllm_artifacts = True

    def set_config(self, config: VllmCompilationConfig) -> None:
        # Replace, never merge
        self.config = config
        self.has_vllm_artifacts = True

    def push_subgraph(self, info: VllmSubgraphInfo) -> None:
        self.subgraphs.append(info)

    def add_artifact(self, path: str, suffix: str = "") -> ArtifactInfo:
        """Attach to the most recently pushed subgraph, or the pre-subgraph bucket if none yet."""
        url = str(path)
        name = PurePosixPath(url).stem or url

        if name.startswith(SPLIT_GRAPH_MARKER):
            # Last writer wins
            self.piecewise_graph_file = url

        artifact = ArtifactInfo(name=name, url=url, suffix=suffix)
        if self.subgraphs:
            self.subgraphs[-1].artifacts.append(artifact)
        else:
            self.pre_subgraph_artifacts.append(artifact)
        return artifact

    def build_compile_range_groups(self) -> List[VllmCompileRangeGroup]:
        """Groups subgraphs by size/range in first-seen order; pure."""
        groups: Dict[str, List[VllmSubgraphWithArtifacts]] = {}
        for subgraph in self.subgraphs:
            key = subgraph.size_or_range()
            groups.setdefault(key, []).append(VllmSubgraphWithArtifacts(
                submod_name=subgraph.display_submod_name(),
                artifacts=list(subgraph.artifacts),
                artifact_count=len(subgraph.artifacts),
            ))

        return [
            VllmCompileRangeGroup(size_or_range=key, submod_count=len(submods), submods=submods)
            for key, submods in groups.items()
        ]

    def build_dynamo_artifacts(self) -> List[ArtifactInfo]:
        return [
            a for a in self.pre_subgraph_artifacts
            if any(a.name.startswith(prefix) for prefix in DYNAMO_ARTIFACT_PREFIXES)
        ]

    def unit_keys(self) -> List[str]:
        """Size/range key of every subgraph in discovery order."""
        return [s.size_or_range() for s in self.subgraphs]


# --- Intents ---

@dataclass(frozen=True)
class SetConfig(Intent):
    config: VllmCompilationConfig

    def apply(self, state: VllmState) -> None:
        state.set_config(self.config)

@dataclass(frozen=True)
class PushUnit(Intent):
    info: VllmSubgraphInfo

    def apply(self, state: VllmState) -> None:
        state.push_subgraph(self.info)
