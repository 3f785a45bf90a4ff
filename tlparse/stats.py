from typing import Dict

from tlparse.config import ParseConfig


class ParseStats:
    """Per-run counters. Strict mode turns some of them into violations."""

    STRICT_COUNTERS = ("unknown", "fail_glog", "fail_json", "fail_payload_decode")
    STRICT_COMPILE_ID_COUNTERS = ("missing_compile_id",)

    def __init__(self):
        self.ok: int = 0
        self.unknown: int = 0
        self.fail_glog: int = 0
        self.fail_json: int = 0
        self.fail_payload_decode: int = 0
        self.missing_compile_id: int = 0
        self.other_rank: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "ok": self.ok,
            "unknown": self.unknown,
            "fail_glog": self.fail_glog,
            "fail_json": self.fail_json,
            "fail_payload_decode": self.fail_payload_decode,
            "missing_compile_id": self.missing_compile_id,
            "other_rank": self.other_rank,
        }

    def strict_violations(self, config: ParseConfig) -> Dict[str, int]:
        """Returns every non-zero counter that the configured strictness forbids."""
        names = []
        if config.strict:
            names.extend(self.STRICT_COUNTERS)
        if config.strict_compile_id:
            names.extend(self.STRICT_COMPILE_ID_COUNTERS)
        counts = self.as_dict()
        return {n: counts[n] for n in names if counts[n] > 0}

    def summary(self) -> str:
        return ", ".join(f"{k}: {v}" for k, v in self.as_dict().items())
