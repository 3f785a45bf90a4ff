import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from tlparse.core.errors import StructuralDecodeError
from tlparse.core.types import Record
from tlparse.parsers.base import ParserOutput, StructuredLogParser

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    parser: str
    outputs: List[ParserOutput] = field(default_factory=list)
    decode_error: Optional[StructuralDecodeError] = None


class ParserRegistry:
    """
    Ordered list of parsers with exclusive dispatch:
    only the first parser whose identify() matches handles a record.
    """

    def __init__(self, parsers: Optional[Iterable[StructuredLogParser]] = None):
        self._parsers: List[StructuredLogParser] = []
        for p in parsers or []:
            self.register(p)

    def register(self, parser: StructuredLogParser):
        self._parsers.append(parser)

    def list_parsers(self) -> List[str]:
        return [p.name for p in self._parsers]

    def dispatch(self, record: Record, state: Any) -> Optional[DispatchResult]:
        """
        Runs the first matching parser against `record`, then applies its
        intents to `state`. Returns None when no parser matched.
        """
        for parser in self._parsers:
            metadata = parser.identify(record)
            if metadata is None:
                continue

            result = DispatchResult(parser=parser.name)
            try:
                result.outputs = list(parser.extract(
                    record.lineno, metadata, record.rank, record.compile_id, record.payload
                ))
            except StructuralDecodeError as e:
                result.decode_error = e

            if parser.marks_domain:
                state.mark_observed()

            if result.decode_error is None:
                try:
                    intents = parser.intents(metadata, record.payload)
                except StructuralDecodeError as e:
                    logger.debug(f"Line {record.lineno}: {parser.name} could not decode payload: {e}")
                    result.decode_error = e
                    intents = []
                for intent in intents:
                    intent.apply(state)
            return result
        return None
