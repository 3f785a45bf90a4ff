import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from tlparse.core.errors import OutputError

# Read once at import; os.umask can only be queried by setting it
_UMASK = os.umask(0)
os.umask(_UMASK)
FILE_MODE = 0o666 & ~_UMASK

def to_json(obj: Any) -> str:
    """Serializes an object to an indented JSON string, keeping key order."""
    return json.dumps(obj, indent=2, ensure_ascii=False)

def pretty_json(payload: str) -> str:
    """Re-indents a JSON document. Raises ValueError if it is not JSON."""
    return json.dumps(json.loads(payload), indent=2, ensure_ascii=False)

def atomic_write_text(path: Path, text: str) -> None:
    """Writes text to a file atomically using a temporary file."""
    path = Path(path)
    safe_mkdir(path.parent)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f"{path.name}.tmp")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(text)
        os.chmod(temp_path, FILE_MODE)
        os.replace(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise

def safe_mkdir(path: Path) -> None:
    """Ensures a directory exists."""
    Path(path).mkdir(parents=True, exist_ok=True)

def write_output_tree(root: Path, files: Dict[str, str]) -> None:
    """
    Writes a mapping of relative path -> content under root.
    Any filesystem failure aborts with OutputError naming the file.
    """
    root = Path(root)
    for rel, content in files.items():
        target = root / rel
        try:
            atomic_write_text(target, content)
        except OSError as e:
            raise OutputError(f"Failed to write {target}: {e}") from e
