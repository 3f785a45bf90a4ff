from tlparse.core.types import ArtifactInfo, CompileId
from tlparse.report.index import CompileDirectory, build_index_context, render_compile_index
from tlparse.report.landing import MultiRankContext, render_landing
from tlparse.vllm.report import build_summary_context, render_summary_html
from tlparse.vllm.state import VllmState
from tlparse.vllm.types import VllmCompilationConfig, VllmSubgraphInfo


def test_empty_state_omits_optional_sections():
    html = render_summary_html(build_summary_context(VllmState()))
    assert "Compilation Configuration" not in html
    assert "Dynamo Compilation" not in html
    assert "Piecewise Split Graph" not in html
    assert "Inductor Compilation" in html


def test_summary_escapes_values_and_renders_booleans():
    state = VllmState()
    state.set_config(VllmCompilationConfig(model="<script>x</script>", use_inductor_graph_partition=True))
    html = render_summary_html(build_summary_context(state))

    assert "Compilation Configuration" in html
    assert "&lt;script&gt;x&lt;/script&gt;" in html
    assert "<script>x</script>" not in html
    assert "<td>true</td>" in html


def test_summary_lists_groups_and_artifacts():
    state = VllmState()
    state.push_subgraph(VllmSubgraphInfo(
        piecewise_index=0, compile_range_start=1, compile_range_end=8,
        is_single_size=False, is_cudagraph_capture_size=False,
    ))
    state.add_artifact("inductor_output_code_0_0_0_9.txt")
    html = render_summary_html(build_summary_context(state))

    assert "range [1, 8]" in html
    assert "Subgraphs (1)" in html
    assert "subgraph_0" in html
    assert "Artifacts (1 files)" in html
    assert 'href="inductor_output_code_0_0_0_9.txt"' in html


def test_compile_index_orders_by_compile_id_with_unknown_last():
    directory = CompileDirectory()
    directory.add(None, ArtifactInfo(name="loose_1", url="loose_1.txt"))
    directory.add(CompileId(frame_id=1, frame_compile_id=0), ArtifactInfo(name="b", url="b.txt"))
    directory.add(CompileId(frame_id=0, frame_compile_id=0), ArtifactInfo(name="a", url="a.txt"))

    assert [e.compile_id for e in directory.entries()] == ["(unknown)", "[1/0]", "[0/0]"]
    ctx = build_index_context(directory, {"ok": 3})
    assert [e.compile_id for e in ctx.entries] == ["[0/0]", "[1/0]", "(unknown)"]

    html = render_compile_index(ctx)
    assert html.index("[0/0]") < html.index("[1/0]") < html.index("(unknown)")
    assert "Back to the vLLM compilation view" not in html


def test_artifact_links_are_url_quoted():
    state = VllmState()
    state.push_subgraph(VllmSubgraphInfo(
        piecewise_index=0, compile_range_start=8, compile_range_end=8,
        is_single_size=True, is_cudagraph_capture_size=False,
    ))
    state.add_artifact("odd#name?v=1%.txt")
    summary = render_summary_html(build_summary_context(state))
    assert 'href="odd%23name%3Fv%3D1%25.txt"' in summary
    assert "odd#name?v=1%" in summary

    directory = CompileDirectory()
    directory.add(None, ArtifactInfo(name="a b&c", url="a b&c.txt"))
    index = render_compile_index(build_index_context(directory, {}))
    assert 'href="a%20b%26c.txt"' in index
    assert "a b&amp;c" in index


def test_landing_links_ranks_and_shows_warnings():
    ctx = MultiRankContext(ranks=["0", "1", "10"], num_ranks=3, desync_suspected=True)
    html = render_landing(ctx)

    assert 'href="rank_0/index.html"' in html
    assert 'href="rank_10/index.html"' in html
    assert "Possible desync" in html
    assert "Compile ID divergence" not in html
    assert "3 rank(s) processed." in html
