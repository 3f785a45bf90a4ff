"""
Splits a structured trace log into Records.

A record starts with a glog-prefixed line whose body is a JSON envelope;
any directly following lines that begin with a tab are its payload.
"""
import json
import logging
import re
from typing import Iterable, Iterator, List, Optional, Tuple

from pydantic import ValidationError

from tlparse.core.types import Envelope, Record
from tlparse.stats import ParseStats

logger = logging.getLogger(__name__)

GLOG_RE = re.compile(
    r"^(?:\[rank\d+\]:)?"
    r"(?P<level>[VIWEC])(?P<date>\d{4}) "
    r"(?P<time>\d{2}:\d{2}:\d{2}\.\d+) "
    r"(?P<thread>\d+) "
    r"(?P<pathname>[^:]+):(?P<line>\d+)\] "
    r"(?P<body>.*)$"
)


class LogTokenizer:
    def __init__(self, stats: ParseStats):
        self.stats = stats

    def _group(self, lines: Iterable[str]) -> Iterator[Tuple[int, str, List[str]]]:
        """Yields (lineno, header line, payload lines) with 1-based line numbers."""
        header: Optional[Tuple[int, str]] = None
        payload: List[str] = []
        for lineno, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r\n")
            if line.startswith("\t"):
                if header is None:
                    self.stats.fail_glog += 1
                    continue
                payload.append(line[1:])
                continue
            if header is not None:
                yield header[0], header[1], payload
            header, payload = None, []
            if not line.strip():
                continue
            header = (lineno, line)
        if header is not None:
            yield header[0], header[1], payload

    def tokenize(self, lines: Iterable[str]) -> Iterator[Record]:
        for lineno, line, payload in self._group(lines):
            m = GLOG_RE.match(line)
            if not m:
                logger.debug(f"Line {lineno}: no glog prefix")
                self.stats.fail_glog += 1
                continue
            try:
                data = json.loads(m.group("body"))
                envelope = Envelope.model_validate(data)
            except (json.JSONDecodeError, RecursionError, ValidationError) as e:
                logger.debug(f"Line {lineno}: bad envelope: {e}")
                self.stats.fail_json += 1
                continue
            yield Record(lineno=lineno, envelope=envelope, payload="\n".join(payload))
