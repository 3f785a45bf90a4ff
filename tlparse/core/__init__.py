"""
Core module for tlparse.
Provides error handling, logging, record types, and serialization.
"""
from tlparse.core.errors import (
    TlparseError, StructuralDecodeError, DiscoveryError, OutputError,
    SandboxViolation, ServeError, StrictModeError, RankProcessingError
)
from tlparse.core.logging import get_logger, set_verbose
from tlparse.core.types import (
    CompileId, ArtifactDescriptor, GraphDumpDescriptor, Envelope, Record, ArtifactInfo
)
from tlparse.core.serialization import (
    to_json, pretty_json, atomic_write_text, safe_mkdir, write_output_tree
)

__all__ = [
    "TlparseError", "StructuralDecodeError", "DiscoveryError", "OutputError",
    "SandboxViolation", "ServeError", "StrictModeError", "RankProcessingError",
    "get_logger", "set_verbose",
    "CompileId", "ArtifactDescriptor", "GraphDumpDescriptor", "Envelope", "Record", "ArtifactInfo",
    "to_json", "pretty_json", "atomic_write_text", "safe_mkdir", "write_output_tree"
]
