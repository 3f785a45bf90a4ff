import html
from typing import List

from pydantic import BaseModel, Field

from tlparse.vllm.templates import QUERY_PARAM_SCRIPT, VLLM_CSS


class RankSummary(BaseModel):
    rank: int
    compile_id_count: int = 0
    unit_count: int = 0
    has_vllm_artifacts: bool = False


class MultiRankContext(BaseModel):
    """Landing page inputs. Ranks are already sorted numerically."""
    custom_header_html: str = ""
    ranks: List[str] = Field(default_factory=list)
    num_ranks: int = 0
    compile_id_divergence: bool = False
    desync_suspected: bool = False
    rank_summaries: List[RankSummary] = Field(default_factory=list)


def render_landing(ctx: MultiRankContext) -> str:
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        "    <meta charset=\"UTF-8\">",
        "    <title>Multi-Rank Compilation Report</title>",
        f"    <style>{VLLM_CSS}    </style>",
        "</head>",
        "<body>",
        ctx.custom_header_html,
        "    <h1>Multi-Rank Compilation Report</h1>",
        f"    <p>{ctx.num_ranks} rank(s) processed.</p>",
    ]

    if ctx.compile_id_divergence:
        parts.append("    <div class=\"warning\">")
        parts.append("        <strong>Compile ID divergence:</strong> ranks compiled different sequences of compile ids.")
        parts.append("    </div>")
    if ctx.desync_suspected:
        parts.append("    <div class=\"warning\">")
        parts.append("        <strong>Possible desync:</strong> ranks agree on compile ids but compiled different subgraph ranges.")
        parts.append("    </div>")

    parts.append("    <div class=\"summary-box\">")
    parts.append("        <ul class=\"artifact-list\">")
    for rank in ctx.ranks:
        label = html.escape(rank)
        parts.append(f"            <li><a href=\"rank_{label}/index.html\">Rank {label}</a></li>")
    parts.append("        </ul>")
    parts.append("    </div>")

    if ctx.rank_summaries:
        parts.append("    <h2>Per-Rank Summary</h2>")
        parts.append("    <table class=\"config-table\">")
        parts.append("        <tr><th>Rank</th><th>Compile IDs</th><th>Subgraphs</th><th>vLLM artifacts</th></tr>")
        for s in ctx.rank_summaries:
            parts.append(
                f"        <tr><td>{s.rank}</td><td>{s.compile_id_count}</td><td>{s.unit_count}</td>"
                f"<td>{'yes' if s.has_vllm_artifacts else 'no'}</td></tr>"
            )
        parts.append("    </table>")

    parts.append(QUERY_PARAM_SCRIPT)
    parts.append("</body>")
    parts.append("</html>")
    parts.append("")
    return "\n".join(parts)
