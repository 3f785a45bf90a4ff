import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from tlparse.config import DEFAULT_RANK_LOG_NAMING, RankLogNaming
from tlparse.core.errors import DiscoveryError

logger = logging.getLogger(__name__)

RANK_TOKEN_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class RankDescriptor:
    path: Path
    rank: int


def parse_rank_number(filename: str, naming: RankLogNaming = DEFAULT_RANK_LOG_NAMING) -> Optional[int]:
    """
    Rank number from <prefix>rank_<N>[_<anything>]<suffix>, or None when the
    name does not follow that pattern.
    """
    marker = naming.rank_marker
    if len(filename) < len(marker) + len(naming.suffix):
        return None
    if not filename.startswith(marker) or not filename.endswith(naming.suffix):
        return None
    middle = filename[len(marker):len(filename) - len(naming.suffix)]
    token = middle.split("_", 1)[0]
    if not RANK_TOKEN_RE.match(token):
        return None
    return int(token)


def discover_rank_logs(directory: Path, naming: RankLogNaming = DEFAULT_RANK_LOG_NAMING) -> List[RankDescriptor]:
    """Qualifying rank logs in `directory`, sorted by rank number."""
    directory = Path(directory)
    if not directory.is_dir():
        raise DiscoveryError(f"Input path {directory} must be a directory when using --all-ranks-html")

    found: Dict[int, Path] = {}
    for entry in sorted(directory.iterdir()):
        if not entry.is_file():
            continue
        rank = parse_rank_number(entry.name, naming)
        if rank is None:
            logger.debug(f"Skipping {entry.name}: not a rank log")
            continue
        if rank in found:
            raise DiscoveryError(f"Duplicate logs for rank {rank}: {found[rank]} and {entry}")
        found[rank] = entry

    if not found:
        raise DiscoveryError(f"No rank log files found in directory {directory}")

    return [RankDescriptor(path=found[rank], rank=rank) for rank in sorted(found)]
