"""
vLLM summary page. Building the context is the only step that reads the
run state; the renderers only look at the context and its has_* flags.
"""
import html
from typing import Any, List, Tuple
from urllib.parse import quote

from tlparse.vllm.state import SPLIT_GRAPH_MARKER, VllmState
from tlparse.vllm.templates import QUERY_PARAM_SCRIPT, VLLM_CSS
from tlparse.vllm.types import ArtifactInfo, VllmCompilationConfig, VllmSummaryContext

GENERIC_INDEX = "tlparse_index.html"

CORE_SETTINGS = (
    ("Model", "model"),
    ("Mode", "mode"),
    ("Backend", "backend"),
    ("Prefix", "prefix"),
    ("Custom Ops", "custom_ops"),
    ("Splitting Ops", "splitting_ops"),
)

COMPILE_SETTINGS = (
    ("CUDAGraph Mode", "cudagraph_mode"),
    ("Use Inductor Graph Partition", "use_inductor_graph_partition"),
    ("Compile Sizes", "compile_sizes"),
    ("Compile Ranges Split Points", "compile_ranges_split_points"),
    ("Inductor Passes", "inductor_passes"),
    ("Enabled Passes", "enabled_passes"),
    ("Dynamic Shapes Type", "dynamic_shapes_type"),
    ("Dynamic Shapes Evaluate Guards", "dynamic_shapes_evaluate_guards"),
)


def build_summary_context(state: VllmState, custom_header_html: str = "") -> VllmSummaryContext:
    dynamo_artifacts = state.build_dynamo_artifacts()
    return VllmSummaryContext(
        custom_header_html=custom_header_html,
        config=state.config or VllmCompilationConfig(),
        has_config=state.config is not None,
        dynamo_artifacts=dynamo_artifacts,
        has_dynamo_artifacts=bool(dynamo_artifacts),
        piecewise_graph_file=state.piecewise_graph_file,
        has_piecewise=state.piecewise_graph_file is not None,
        compile_range_groups=state.build_compile_range_groups(),
    )


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _settings_rows(config: VllmCompilationConfig, fields: Tuple[Tuple[str, str], ...]) -> List[str]:
    return [
        f"            <tr><td><strong>{label}</strong></td>"
        f"<td>{html.escape(_display(getattr(config, attr)))}</td></tr>"
        for label, attr in fields
    ]


def _artifact_items(artifacts: List[ArtifactInfo], indent: str) -> List[str]:
    return [
        f"{indent}<li><a href=\"{html.escape(quote(a.url))}\">{html.escape(a.name)}</a> {html.escape(a.suffix)}</li>"
        for a in artifacts
    ]


def render_summary_html(ctx: VllmSummaryContext) -> str:
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        "    <meta charset=\"UTF-8\">",
        "    <title>vLLM Compilation Summary</title>",
        f"    <style>{VLLM_CSS}    </style>",
        "</head>",
        "<body>",
        ctx.custom_header_html,
        "    <div class=\"banner\">",
        f"        This is the vLLM compilation view. <a href=\"{GENERIC_INDEX}\">View original tlparse output &rarr;</a>",
        "    </div>",
        "    <h1>vLLM Compilation Summary</h1>",
    ]

    if ctx.has_config:
        parts.append("    <h2>Compilation Configuration</h2>")
        parts.append("    <details open>")
        parts.append("        <summary><strong>Core Settings</strong></summary>")
        parts.append("        <table class=\"config-table\">")
        parts.extend(_settings_rows(ctx.config, CORE_SETTINGS))
        parts.append("        </table>")
        parts.append("    </details>")
        parts.append("    <details open>")
        parts.append("        <summary><strong>Compile Settings</strong></summary>")
        parts.append("        <table class=\"config-table\">")
        parts.extend(_settings_rows(ctx.config, COMPILE_SETTINGS))
        parts.append("        </table>")
        parts.append("    </details>")

    if ctx.has_dynamo_artifacts:
        parts.append("    <h2>Dynamo Compilation</h2>")
        parts.append("    <div class=\"summary-box\">")
        parts.append("        <ul class=\"artifact-list\">")
        parts.extend(_artifact_items(ctx.dynamo_artifacts, "            "))
        parts.append("        </ul>")
        parts.append("    </div>")

    if ctx.has_piecewise:
        parts.append("    <h2>Piecewise Split Graph</h2>")
        parts.append("    <div class=\"summary-box\">")
        parts.append("        <ul class=\"artifact-list\">")
        parts.append(
            f"            <li><a href=\"{html.escape(quote(ctx.piecewise_graph_file))}\">{SPLIT_GRAPH_MARKER}</a></li>"
        )
        parts.append("        </ul>")
        parts.append("    </div>")

    parts.append("    <h2>Inductor Compilation</h2>")
    for group in ctx.compile_range_groups:
        parts.append("    <div class=\"compile-range-group\">")
        parts.append(f"        <h3>{html.escape(group.size_or_range)}</h3>")
        parts.append("        <details open class=\"submods-container\">")
        parts.append(f"            <summary>Subgraphs ({group.submod_count})</summary>")
        for sub in group.submods:
            parts.append("            <div class=\"subgraph\">")
            parts.append(f"                <h4>{html.escape(sub.submod_name)}</h4>")
            if sub.artifacts:
                parts.append("                <div class=\"artifact-section\">")
                parts.append("                    <details open>")
                parts.append(f"                        <summary>Artifacts ({sub.artifact_count} files)</summary>")
                parts.append("                        <ul class=\"artifact-list\">")
                parts.extend(_artifact_items(sub.artifacts, "                            "))
                parts.append("                        </ul>")
                parts.append("                    </details>")
                parts.append("                </div>")
            parts.append("            </div>")
        parts.append("        </details>")
        parts.append("    </div>")

    parts.append(QUERY_PARAM_SCRIPT)
    parts.append("</body>")
    parts.append("</html>")
    parts.append("")
    return "\n".join(parts)


def render_summary_text(ctx: VllmSummaryContext) -> str:
    """Plain-text rendering of the same context, for diffing."""
    lines = ["vLLM Compilation Summary", "========================", ""]

    if ctx.has_config:
        lines.append("Compilation Configuration")
        for label, attr in CORE_SETTINGS + COMPILE_SETTINGS:
            lines.append(f"  {label}: {_display(getattr(ctx.config, attr))}")
        lines.append("")

    if ctx.has_dynamo_artifacts:
        lines.append("Dynamo Compilation")
        for a in ctx.dynamo_artifacts:
            lines.append(f"  {a.name} -> {a.url} {a.suffix}".rstrip())
        lines.append("")

    if ctx.has_piecewise:
        lines.append("Piecewise Split Graph")
        lines.append(f"  {ctx.piecewise_graph_file}")
        lines.append("")

    lines.append("Inductor Compilation")
    for group in ctx.compile_range_groups:
        lines.append(f"  {group.size_or_range} ({group.submod_count} subgraphs)")
        for sub in group.submods:
            lines.append(f"    {sub.submod_name} ({sub.artifact_count} files)")
            for a in sub.artifacts:
                lines.append(f"      {a.name} -> {a.url} {a.suffix}".rstrip())
    lines.append("")
    return "\n".join(lines)
