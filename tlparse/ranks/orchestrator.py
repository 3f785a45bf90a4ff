"""
Runs the single-log pipeline once per rank log and writes a landing page
that links every rank's report.

Each rank gets its own output subdirectory and its own run state. The first
failing rank aborts the whole run; directories already written for earlier
ranks are left in place and no landing page is written.
"""
import logging
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List

from tlparse.config import DEFAULT_RANK_LOG_NAMING, ParseConfig, RankLogNaming
from tlparse.core.errors import OutputError, RankProcessingError, TlparseError
from tlparse.core.serialization import safe_mkdir, write_output_tree
from tlparse.pipeline import INDEX_HTML, check_strict, parse_path
from tlparse.ranks.diagnostics import (
    COMPILE_ID_DIVERGENCE, DESYNC_SUSPECTED, RankResult, correlate_ranks
)
from tlparse.ranks.discovery import RankDescriptor, discover_rank_logs
from tlparse.report.landing import MultiRankContext, RankSummary, render_landing

logger = logging.getLogger(__name__)


def setup_output_directory(out: Path, overwrite: bool) -> Path:
    out = Path(out)
    if out.exists():
        if not overwrite:
            raise OutputError(f"Directory {out} already exists; pass --overwrite to replace it or use -o OUTDIR")
        try:
            if out.is_dir():
                shutil.rmtree(out)
            else:
                out.unlink()
        except OSError as e:
            raise OutputError(f"Failed to clear {out}: {e}") from e
    try:
        safe_mkdir(out)
    except OSError as e:
        raise OutputError(f"Failed to create {out}: {e}") from e
    return out


def rank_subdir(out: Path, rank: int) -> Path:
    return Path(out) / f"rank_{rank}"


def process_rank(descriptor: RankDescriptor, config: ParseConfig, out: Path) -> RankResult:
    """Parses one rank log and writes its report under <out>/rank_<n>."""
    result = parse_path(descriptor.path, config)
    check_strict(result, config, descriptor.path)
    write_output_tree(rank_subdir(out, descriptor.rank), result.files)
    return RankResult(
        rank=descriptor.rank,
        path=descriptor.path,
        compile_ids=result.compile_ids,
        unit_keys=result.unit_keys,
        has_vllm_artifacts=result.has_vllm_artifacts,
        stats=result.stats.as_dict(),
    )


def handle_one_rank(descriptor: RankDescriptor, config: ParseConfig, out: Path) -> RankResult:
    logger.info(f"Processing rank {descriptor.rank} -> {rank_subdir(out, descriptor.rank)}")
    try:
        return process_rank(descriptor, config, out)
    except (TlparseError, OSError) as e:
        raise RankProcessingError(descriptor.rank, str(descriptor.path), e) from e


def build_multi_rank_context(results: List[RankResult],
                             diagnostics: Dict[str, bool],
                             custom_header_html: str = "") -> MultiRankContext:
    ordered = sorted(results, key=lambda r: r.rank)
    return MultiRankContext(
        custom_header_html=custom_header_html,
        ranks=[str(r.rank) for r in ordered],
        num_ranks=len(ordered),
        compile_id_divergence=diagnostics.get(COMPILE_ID_DIVERGENCE, False),
        desync_suspected=diagnostics.get(DESYNC_SUSPECTED, False),
        rank_summaries=[
            RankSummary(
                rank=r.rank,
                compile_id_count=len(r.compile_ids),
                unit_count=len(r.unit_keys),
                has_vllm_artifacts=r.has_vllm_artifacts,
            )
            for r in ordered
        ],
    )


def _run_parallel(descriptors: List[RankDescriptor], config: ParseConfig, out: Path,
                  max_workers: int) -> List[RankResult]:
    results = []
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(handle_one_rank, d, config, out): d for d in descriptors}
        for future in as_completed(futures):
            try:
                results.append(future.result())
            except RankProcessingError:
                for f in futures:
                    f.cancel()
                raise
    return results


def handle_all_ranks(config: ParseConfig,
                     input_dir: Path,
                     out: Path,
                     overwrite: bool = False,
                     max_workers: int = 1,
                     naming: RankLogNaming = DEFAULT_RANK_LOG_NAMING) -> Path:
    """
    Processes every rank log in `input_dir` and returns the landing page path.
    Ranks run in ascending order unless max_workers > 1.
    """
    descriptors = discover_rank_logs(input_dir, naming)
    out = setup_output_directory(out, overwrite)

    if max_workers > 1:
        results = _run_parallel(descriptors, config, out, max_workers)
    else:
        results = [handle_one_rank(d, config, out) for d in descriptors]
    results.sort(key=lambda r: r.rank)

    diagnostics = correlate_ranks(results)
    ctx = build_multi_rank_context(results, diagnostics, config.custom_header_html)
    write_output_tree(out, {INDEX_HTML: render_landing(ctx)})
    logger.info(f"Wrote landing page for {ctx.num_ranks} rank(s) to {out / INDEX_HTML}")
    return out / INDEX_HTML
