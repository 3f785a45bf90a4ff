import dataclasses
import os
from typing import Any, List, Tuple

DEFAULT_OUTPUT_DIR = "tl_out"

def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")

@dataclasses.dataclass
class ParseConfig:
    """Options consumed by the single-run pipeline and the multi-rank orchestrator."""
    strict: bool = False
    strict_compile_id: bool = False
    custom_parsers: List[Any] = dataclasses.field(default_factory=list)
    custom_header_html: str = ""
    verbose: bool = False
    plain_text: bool = False
    export: bool = False
    inductor_provenance: bool = False

    @staticmethod
    def from_env() -> 'ParseConfig':
        # Flags only; header markup and custom parsers come from the caller
        return ParseConfig(
            strict=_env_flag("TLPARSE_STRICT"),
            strict_compile_id=_env_flag("TLPARSE_STRICT_COMPILE_ID"),
            verbose=_env_flag("TLPARSE_VERBOSE"),
            plain_text=_env_flag("TLPARSE_PLAIN_TEXT"),
        )

@dataclasses.dataclass(frozen=True)
class RankLogNaming:
    """File naming contract for per-rank logs: <prefix>rank_<uint>[_<anything>]<suffix>."""
    prefix: str = "dedicated_log_torch_trace_"
    suffix: str = ".log"

    @property
    def rank_marker(self) -> str:
        return f"{self.prefix}rank_"

@dataclasses.dataclass(frozen=True)
class ServeConfig:
    host: str = "127.0.0.1"
    port_range: Tuple[int, int] = (8000, 8100)  # end exclusive

DEFAULT_RANK_LOG_NAMING = RankLogNaming()
DEFAULT_SERVE_CONFIG = ServeConfig()
