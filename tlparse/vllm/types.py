from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from tlparse.core.types import ArtifactInfo


class VllmCompilationConfig(BaseModel):
    model: Optional[str] = None
    prefix: Optional[str] = None
    mode: Optional[str] = None
    backend: Optional[str] = None
    custom_ops: Optional[str] = None
    splitting_ops: Optional[str] = None
    cudagraph_mode: Optional[str] = None
    compile_sizes: Optional[str] = None
    compile_ranges_split_points: Optional[str] = None
    use_inductor_graph_partition: Optional[bool] = None
    inductor_passes: Optional[str] = None
    enabled_passes: Optional[str] = None
    dynamic_shapes_type: Optional[str] = None
    dynamic_shapes_evaluate_guards: Optional[bool] = None


class VllmSubgraphInfo(BaseModel):
    """
    One piecewise-compiled subgraph, decoded from a vllm_piecewise_compile_start payload.
    The artifact list is owned by the run state and never read from the payload.
    """
    model_config = ConfigDict(populate_by_name=True)

    index: int = Field(alias="piecewise_index")
    submod_name: Optional[str] = None
    compile_range_start: int
    compile_range_end: int
    is_single_size: bool
    is_cudagraph_size: bool = Field(alias="is_cudagraph_capture_size")

    _artifacts: List[ArtifactInfo] = PrivateAttr(default_factory=list)

    @property
    def artifacts(self) -> List[ArtifactInfo]:
        return self._artifacts

    def size_or_range(self) -> str:
        if self.is_single_size:
            return f"size {self.compile_range_start}"
        return f"range [{self.compile_range_start}, {self.compile_range_end}]"

    def display_submod_name(self) -> str:
        return self.submod_name if self.submod_name is not None else f"subgraph_{self.index}"


class VllmSubgraphWithArtifacts(BaseModel):
    submod_name: str
    artifacts: List[ArtifactInfo]
    artifact_count: int


class VllmCompileRangeGroup(BaseModel):
    size_or_range: str
    submod_count: int
    submods: List[VllmSubgraphWithArtifacts]


class VllmSummaryContext(BaseModel):
    """Everything the summary renderers need; the has_* flags gate optional sections."""
    custom_header_html: str = ""
    config: VllmCompilationConfig = Field(default_factory=VllmCompilationConfig)
    has_config: bool = False
    dynamo_artifacts: List[ArtifactInfo] = Field(default_factory=list)
    has_dynamo_artifacts: bool = False
    piecewise_graph_file: Optional[str] = None
    has_piecewise: bool = False
    compile_range_groups: List[VllmCompileRangeGroup] = Field(default_factory=list)
