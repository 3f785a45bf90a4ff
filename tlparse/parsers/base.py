import abc
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Callable, List, Optional, Union

from tlparse.core.types import CompileId, Record


@dataclass(frozen=True)
class Metadata:
    """What a parser matched on: an artifact or a graph dump, and its name."""
    kind: str  # "artifact" or "graph_dump"
    name: str
    encoding: Optional[str] = None

    @classmethod
    def for_artifact(cls, record: Record) -> "Metadata":
        return cls(kind="artifact", name=record.artifact.name, encoding=record.artifact.encoding)

    @classmethod
    def for_graph_dump(cls, record: Record) -> "Metadata":
        return cls(kind="graph_dump", name=record.graph_dump.name)


# --- Extraction results ---

@dataclass(frozen=True)
class PayloadFile:
    """Write the raw payload to `path`."""
    path: str

@dataclass(frozen=True)
class PayloadReformatFile:
    """Write transform(payload) to `path`. The transform may raise ValueError."""
    path: str
    transform: Callable[[str], str]

@dataclass(frozen=True)
class NoOutput:
    """Matched, but nothing to write."""
    pass

ParserOutput = Union[PayloadFile, PayloadReformatFile, NoOutput]


class Intent(abc.ABC):
    """A side effect on the per-run state, applied by the state's owner."""

    @abc.abstractmethod
    def apply(self, state: Any) -> None:
        pass


class StructuredLogParser(abc.ABC):
    # When True, a match alone flags the run as containing domain artifacts
    marks_domain: bool = False

    @property
    @abc.abstractmethod
    def name(self) -> str:
        pass

    @abc.abstractmethod
    def identify(self, record: Record) -> Optional[Metadata]:
        pass

    @abc.abstractmethod
    def extract(self,
                lineno: int,
                metadata: Metadata,
                rank: Optional[int],
                compile_id: Optional[CompileId],
                payload: str) -> List[ParserOutput]:
        """Files to emit for this record. Must not touch run state."""
        pass

    def intents(self, metadata: Metadata, payload: str) -> List[Intent]:
        """
        Structured side effects for this record.
        Raises StructuralDecodeError when the payload has the wrong shape.
        """
        return []


def build_file_path(filename: str, lineno: int, compile_id: Optional[CompileId]) -> str:
    """
    Deterministic, collision-free output name:
    <stem>_<compile id>_<lineno><ext>, or <stem>_<lineno><ext> without a compile id.
    """
    p = PurePosixPath(filename)
    stem, ext = p.stem, p.suffix
    if compile_id is not None:
        return f"{stem}_{compile_id.as_filename_part()}_{lineno}{ext}"
    return f"{stem}_{lineno}{ext}"
