"""Generic per-compile-id index of every file a run emitted."""
import html
from typing import Dict, List, Optional
from urllib.parse import quote

from pydantic import BaseModel, Field

from tlparse.core.types import ArtifactInfo, CompileId
from tlparse.vllm.templates import QUERY_PARAM_SCRIPT, VLLM_CSS

UNKNOWN_COMPILE_ID = "(unknown)"

EXPORT_ARTIFACT_PREFIXES = (
    "exported_program",
    "export_",
    "missing_fake_kernel",
    "mismatched_fake_kernel",
)


class CompileDirectoryEntry(BaseModel):
    compile_id: str
    artifacts: List[ArtifactInfo] = Field(default_factory=list)


class CompileDirectory:
    """Files grouped by compile id in first-seen order."""

    def __init__(self):
        self._entries: Dict[str, CompileDirectoryEntry] = {}
        self._ids: Dict[str, Optional[CompileId]] = {}

    def add(self, compile_id: Optional[CompileId], artifact: ArtifactInfo) -> None:
        key = str(compile_id) if compile_id is not None else UNKNOWN_COMPILE_ID
        if key not in self._entries:
            self._entries[key] = CompileDirectoryEntry(compile_id=key)
            self._ids[key] = compile_id
        self._entries[key].artifacts.append(artifact)

    def entries(self) -> List[CompileDirectoryEntry]:
        return list(self._entries.values())

    def sorted_entries(self) -> List[CompileDirectoryEntry]:
        """Known compile ids in CompileId order, files without one last."""
        known = sorted((cid, key) for key, cid in self._ids.items() if cid is not None)
        ordered = [self._entries[key] for _, key in known]
        if UNKNOWN_COMPILE_ID in self._entries:
            ordered.append(self._entries[UNKNOWN_COMPILE_ID])
        return ordered

    def to_json_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            key: [a.model_dump() for a in entry.artifacts]
            for key, entry in self._entries.items()
        }


class IndexContext(BaseModel):
    custom_header_html: str = ""
    entries: List[CompileDirectoryEntry] = Field(default_factory=list)
    has_entries: bool = False
    stats: Dict[str, int] = Field(default_factory=dict)
    export_mode: bool = False
    has_vllm_view: bool = False


def build_index_context(directory: CompileDirectory,
                        stats: Dict[str, int],
                        custom_header_html: str = "",
                        export_mode: bool = False,
                        has_vllm_view: bool = False) -> IndexContext:
    entries = directory.sorted_entries()
    if export_mode:
        entries = [
            CompileDirectoryEntry(
                compile_id=e.compile_id,
                artifacts=[a for a in e.artifacts if a.name.startswith(EXPORT_ARTIFACT_PREFIXES)],
            )
            for e in entries
        ]
        entries = [e for e in entries if e.artifacts]
    return IndexContext(
        custom_header_html=custom_header_html,
        entries=entries,
        has_entries=bool(entries),
        stats=dict(stats),
        export_mode=export_mode,
        has_vllm_view=has_vllm_view,
    )


def render_compile_index(ctx: IndexContext) -> str:
    title = "Export Diagnostics" if ctx.export_mode else "Compile Directory"
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        "    <meta charset=\"UTF-8\">",
        f"    <title>{title}</title>",
        f"    <style>{VLLM_CSS}    </style>",
        "</head>",
        "<body>",
        ctx.custom_header_html,
    ]
    if ctx.has_vllm_view:
        parts.append("    <div class=\"banner\"><a href=\"index.html\">&larr; Back to the vLLM compilation view</a></div>")
    parts.append(f"    <h1>{title}</h1>")

    if not ctx.has_entries:
        parts.append("    <p>No artifacts were extracted from this log.</p>")
    for entry in ctx.entries:
        parts.append("    <div class=\"summary-box\">")
        parts.append(f"        <h3>{html.escape(entry.compile_id)}</h3>")
        parts.append("        <ul class=\"artifact-list\">")
        for a in entry.artifacts:
            parts.append(
                f"            <li><a href=\"{html.escape(quote(a.url))}\">{html.escape(a.name)}</a> {html.escape(a.suffix)}</li>"
            )
        parts.append("        </ul>")
        parts.append("    </div>")

    parts.append("    <h2>Log Statistics</h2>")
    parts.append("    <table class=\"config-table\">")
    for key, value in ctx.stats.items():
        parts.append(f"        <tr><td>{html.escape(key)}</td><td>{value}</td></tr>")
    parts.append("    </table>")
    parts.append(QUERY_PARAM_SCRIPT)
    parts.append("</body>")
    parts.append("</html>")
    parts.append("")
    return "\n".join(parts)
