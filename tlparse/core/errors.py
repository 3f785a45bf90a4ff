from typing import Dict


class TlparseError(Exception):
    """Base exception for all tlparse related errors."""
    pass

class StructuralDecodeError(TlparseError):
    """Raised when a record payload does not have the shape its parser expects."""
    pass

class DiscoveryError(TlparseError):
    """Raised when rank log discovery finds nothing usable or an input path is not a directory."""
    pass

class OutputError(TlparseError):
    """Raised when writing the output tree fails."""
    pass

class SandboxViolation(TlparseError):
    """Raised when a requested path resolves outside the served root."""
    pass

class ServeError(TlparseError):
    """Raised when the static file server cannot start."""
    pass

class StrictModeError(TlparseError):
    """
    Raised after a run in strict mode when violations were counted.
    Carries every non-zero counter, not only the first offence.
    """
    def __init__(self, path: str, violations: Dict[str, int]):
        self.path = path
        self.violations = dict(violations)
        details = ", ".join(f"{k}={v}" for k, v in self.violations.items())
        super().__init__(f"Strict mode violations in {path}: {details}")

class RankProcessingError(TlparseError):
    """Raised when processing a single rank fails during a multi-rank run."""
    def __init__(self, rank: int, path: str, cause: Exception):
        self.rank = rank
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to process rank {rank} ({path}): {cause}")
