from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict


class CompileId(BaseModel):
    """
    Identifies one compile unit inside a log.
    Used to namespace output filenames and to order the compile directory.
    """
    model_config = ConfigDict(frozen=True)

    compiled_autograd_id: Optional[int] = None
    frame_id: Optional[int] = None
    frame_compile_id: Optional[int] = None
    attempt: Optional[int] = None

    def sort_key(self) -> Tuple[int, int, int, int]:
        # Missing parts sort before any real value
        return (
            -1 if self.compiled_autograd_id is None else self.compiled_autograd_id,
            -1 if self.frame_id is None else self.frame_id,
            -1 if self.frame_compile_id is None else self.frame_compile_id,
            -1 if self.attempt is None else self.attempt,
        )

    def __lt__(self, other: "CompileId") -> bool:
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        prefix = f"!{self.compiled_autograd_id}/" if self.compiled_autograd_id is not None else ""
        frame = "-" if self.frame_id is None else str(self.frame_id)
        frame_compile = "-" if self.frame_compile_id is None else str(self.frame_compile_id)
        attempt = f"_{self.attempt}" if self.attempt else ""
        return f"[{prefix}{frame}/{frame_compile}{attempt}]"

    def as_filename_part(self) -> str:
        """Filesystem-safe form, e.g. 0_1_0 or ca2_0_1_0."""
        parts = [
            "-" if self.frame_id is None else str(self.frame_id),
            "-" if self.frame_compile_id is None else str(self.frame_compile_id),
            str(self.attempt or 0),
        ]
        name = "_".join(parts)
        if self.compiled_autograd_id is not None:
            name = f"ca{self.compiled_autograd_id}_{name}"
        return name

    @classmethod
    def from_envelope_fields(cls, fields: Dict[str, Any]) -> Optional["CompileId"]:
        """Returns None when the envelope carries no compile identity at all."""
        keys = ("compiled_autograd_id", "frame_id", "frame_compile_id")
        if all(fields.get(k) is None for k in keys):
            return None
        return cls(
            compiled_autograd_id=fields.get("compiled_autograd_id"),
            frame_id=fields.get("frame_id"),
            frame_compile_id=fields.get("frame_compile_id"),
            attempt=fields.get("attempt"),
        )


class ArtifactDescriptor(BaseModel):
    name: str
    encoding: str = "string"


class GraphDumpDescriptor(BaseModel):
    name: str


class Envelope(BaseModel):
    """The JSON object that follows the glog prefix on a structured log line."""
    model_config = ConfigDict(extra="allow")

    rank: Optional[int] = None
    compiled_autograd_id: Optional[int] = None
    frame_id: Optional[int] = None
    frame_compile_id: Optional[int] = None
    attempt: Optional[int] = None
    artifact: Optional[ArtifactDescriptor] = None
    graph_dump: Optional[GraphDumpDescriptor] = None
    has_payload: Optional[str] = None

    def compile_id(self) -> Optional[CompileId]:
        return CompileId.from_envelope_fields(self.model_dump())


@dataclass(frozen=True)
class Record:
    """One structured log line plus its payload. Immutable."""
    lineno: int
    envelope: Envelope
    payload: str = ""

    @property
    def rank(self) -> Optional[int]:
        return self.envelope.rank

    @property
    def compile_id(self) -> Optional[CompileId]:
        return self.envelope.compile_id()

    @property
    def artifact(self) -> Optional[ArtifactDescriptor]:
        return self.envelope.artifact

    @property
    def graph_dump(self) -> Optional[GraphDumpDescriptor]:
        return self.envelope.graph_dump


class ArtifactInfo(BaseModel):
    """Pointer to an already written output file plus a short display note."""
    name: str
    url: str
    suffix: str = ""
