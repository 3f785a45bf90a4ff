"""
Single-log pipeline: tokenize, dispatch each record to one parser,
accumulate run state, then render the report pages.

The result is an in-memory tree (relative path -> content); writing it to
disk is left to the caller.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from tlparse.config import ParseConfig
from tlparse.core.errors import StrictModeError, TlparseError
from tlparse.core.serialization import to_json
from tlparse.parsers.base import NoOutput, PayloadFile, PayloadReformatFile
from tlparse.parsers.generic import ArtifactParser, GraphDumpParser
from tlparse.parsers.registry import ParserRegistry
from tlparse.report.index import CompileDirectory, build_index_context, render_compile_index
from tlparse.stats import ParseStats
from tlparse.tokenizer import LogTokenizer
from tlparse.vllm.parsers import vllm_parsers
from tlparse.vllm.report import (
    GENERIC_INDEX, build_summary_context, render_summary_html, render_summary_text
)
from tlparse.vllm.state import VllmState

logger = logging.getLogger(__name__)

INDEX_HTML = "index.html"
INDEX_TXT = "index.txt"
COMPILE_DIRECTORY_JSON = "compile_directory.json"
REFORMAT_FAILED_SUFFIX = "❌"


@dataclass
class ParseResult:
    files: Dict[str, str] = field(default_factory=dict)
    stats: ParseStats = field(default_factory=ParseStats)
    compile_ids: List[str] = field(default_factory=list)
    unit_keys: List[str] = field(default_factory=list)
    has_vllm_artifacts: bool = False


def default_registry(config: ParseConfig) -> ParserRegistry:
    """vLLM parsers first, then user parsers, then the generic fallbacks."""
    registry = ParserRegistry(vllm_parsers())
    for parser in config.custom_parsers:
        registry.register(parser)
    registry.register(GraphDumpParser())
    registry.register(ArtifactParser(include_provenance=config.inductor_provenance))
    return registry


def parse_lines(lines: Iterable[str], config: Optional[ParseConfig] = None) -> ParseResult:
    config = config or ParseConfig()
    stats = ParseStats()
    state = VllmState()
    directory = CompileDirectory()
    registry = default_registry(config)
    files: Dict[str, str] = {}
    compile_ids: List[str] = []
    expected_rank: Optional[int] = None

    for record in LogTokenizer(stats).tokenize(lines):
        if record.rank is not None:
            if expected_rank is None:
                expected_rank = record.rank
            elif record.rank != expected_rank:
                stats.other_rank += 1
                continue

        compile_id = record.compile_id
        if compile_id is None:
            stats.missing_compile_id += 1
        elif str(compile_id) not in compile_ids:
            compile_ids.append(str(compile_id))

        result = registry.dispatch(record, state)
        if result is None:
            stats.unknown += 1
            continue
        if result.decode_error is not None:
            stats.fail_payload_decode += 1
        else:
            stats.ok += 1

        for output in result.outputs:
            if isinstance(output, NoOutput):
                continue
            suffix = ""
            if isinstance(output, PayloadReformatFile):
                try:
                    content = output.transform(record.payload)
                except (ValueError, RecursionError) as e:
                    logger.debug(f"Line {record.lineno}: could not reformat {output.path}: {e}")
                    content = record.payload
                    suffix = REFORMAT_FAILED_SUFFIX
            elif isinstance(output, PayloadFile):
                content = record.payload
            else:
                raise TlparseError(f"Unsupported parser output from {result.parser}: {output!r}")
            files[output.path] = content
            directory.add(compile_id, state.add_artifact(output.path, suffix))

    has_vllm = state.has_artifacts()
    stat_counts = stats.as_dict()
    files[COMPILE_DIRECTORY_JSON] = to_json(directory.to_json_dict())

    summary = build_summary_context(state, config.custom_header_html)
    index_ctx = build_index_context(
        directory, stat_counts,
        custom_header_html=config.custom_header_html,
        export_mode=config.export,
        has_vllm_view=has_vllm,
    )
    if has_vllm:
        files[INDEX_HTML] = render_summary_html(summary)
        files[GENERIC_INDEX] = render_compile_index(index_ctx)
    else:
        files[INDEX_HTML] = render_compile_index(index_ctx)
    if config.plain_text:
        files[INDEX_TXT] = render_summary_text(summary)

    logger.debug(f"Parsed log: {stats.summary()}")
    return ParseResult(
        files=files,
        stats=stats,
        compile_ids=compile_ids,
        unit_keys=state.unit_keys(),
        has_vllm_artifacts=has_vllm,
    )


def parse_path(path: Path, config: Optional[ParseConfig] = None) -> ParseResult:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return parse_lines(f, config)
    except OSError as e:
        raise TlparseError(f"Failed to read {path}: {e}") from e


def check_strict(result: ParseResult, config: ParseConfig, path: Path) -> None:
    """Raises StrictModeError carrying every counter the config forbids."""
    violations = result.stats.strict_violations(config)
    if violations:
        raise StrictModeError(str(path), violations)
