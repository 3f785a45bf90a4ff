import json

import pytest

from tlparse.config import ParseConfig
from tlparse.core.errors import StrictModeError
from tlparse.pipeline import check_strict, parse_lines, parse_path


def parse_text(text, config=None):
    return parse_lines(text.splitlines(keepends=True), config)


def test_vllm_log_produces_summary_and_generic_index(vllm_log):
    result = parse_text(vllm_log().text())

    assert result.has_vllm_artifacts
    assert "vllm_compilation_config_0_0_0_1.json" in result.files
    assert "vllm_piecewise_split_graph_0_0_0_5.txt" in result.files
    assert result.files["inductor_output_code_0_0_0_13.txt"] == "def call(args): return args"
    assert "vLLM Compilation Summary" in result.files["index.html"]
    assert "tlparse_index.html" in result.files
    assert 'href="vllm_piecewise_split_graph_0_0_0_5.txt"' in result.files["index.html"]
    assert result.unit_keys == ["size 8", "range [1, 16]"]
    assert result.compile_ids == ["[0/0]"]
    assert result.stats.ok == 7


def test_config_payload_is_reindented(vllm_log):
    result = parse_text(vllm_log().text())
    content = result.files["vllm_compilation_config_0_0_0_1.json"]
    assert json.loads(content)["model"] == "facebook/opt-125m"
    assert content.startswith("{\n  ")


def test_plain_log_uses_generic_index(trace_log):
    log = trace_log().artifact("inductor_output_code", "code").graph_dump("aot_forward_graph", "graph")
    result = parse_text(log.text())

    assert not result.has_vllm_artifacts
    assert "tlparse_index.html" not in result.files
    assert "Compile Directory" in result.files["index.html"]
    directory = json.loads(result.files["compile_directory.json"])
    assert [a["url"] for a in directory["[0/0]"]] == [
        "inductor_output_code_0_0_0_1.txt", "aot_forward_graph_0_0_0_3.txt"
    ]


def test_bad_json_artifact_falls_back_to_raw_payload(trace_log):
    log = trace_log().artifact("fx_graph_cache_miss", "{broken", encoding="json")
    result = parse_text(log.text())

    assert result.files["fx_graph_cache_miss_0_0_0_1.json"] == "{broken"
    directory = json.loads(result.files["compile_directory.json"])
    assert directory["[0/0]"][0]["suffix"] == "❌"


def test_deeply_nested_json_artifact_falls_back_to_raw_payload(trace_log):
    nested = "[" * 100000 + "]" * 100000
    log = trace_log().artifact("fx_graph_cache_miss", nested, encoding="json")
    log.artifact("inductor_output_code", "code")
    result = parse_text(log.text())

    assert result.files["fx_graph_cache_miss_0_0_0_1.json"] == nested
    assert result.files["inductor_output_code_0_0_0_3.txt"] == "code"
    directory = json.loads(result.files["compile_directory.json"])
    assert directory["[0/0]"][0]["suffix"] == "❌"


def test_malformed_compile_start_is_counted_and_fails_strict_mode(trace_log):
    log = trace_log()
    log.artifact("vllm_piecewise_compile_start", '{"piecewise_index": 0}', encoding="json")
    log.artifact("inductor_output_code", "code")
    result = parse_text(log.text())

    assert result.stats.fail_payload_decode == 1
    assert result.unit_keys == []
    check_strict(result, ParseConfig(), "vllm.log")
    with pytest.raises(StrictModeError) as exc:
        check_strict(result, ParseConfig(strict=True), "vllm.log")
    assert exc.value.violations == {"fail_payload_decode": 1}


def test_unknown_and_missing_compile_id_counters(trace_log):
    log = trace_log()
    log.record({"dynamo_start": {"stack": []}, "frame_id": 0, "frame_compile_id": 0})
    log.artifact("inductor_output_code", "code", compile_id=None)
    result = parse_text(log.text())

    assert result.stats.unknown == 1
    assert result.stats.missing_compile_id == 1
    assert "inductor_output_code_2.txt" in result.files
    with pytest.raises(StrictModeError) as exc:
        check_strict(result, ParseConfig(strict=True, strict_compile_id=True), "x.log")
    assert exc.value.violations == {"unknown": 1, "missing_compile_id": 1}


def test_records_from_other_ranks_are_skipped(trace_log):
    log = trace_log()
    log.record({"artifact": {"name": "a"}, "rank": 0, "frame_id": 0, "frame_compile_id": 0}, "x")
    log.record({"artifact": {"name": "b"}, "rank": 1, "frame_id": 0, "frame_compile_id": 0}, "y")
    result = parse_text(log.text())

    assert result.stats.other_rank == 1
    assert "a_0_0_0_1.txt" in result.files
    assert "b_0_0_0_3.txt" not in result.files


def test_plain_text_mode_writes_text_summary(vllm_log):
    result = parse_text(vllm_log().text(), ParseConfig(plain_text=True))
    text = result.files["index.txt"]
    assert "size 8 (1 subgraphs)" in text
    assert "submod_0 (1 files)" in text
    assert "subgraph_1 (1 files)" in text


def test_export_mode_only_lists_export_artifacts(trace_log):
    log = trace_log()
    log.artifact("exported_program", "ep")
    log.artifact("inductor_output_code", "code")
    result = parse_text(log.text(), ParseConfig(export=True))

    index = result.files["index.html"]
    assert "Export Diagnostics" in index
    assert "exported_program_0_0_0_1.txt" in index
    assert "inductor_output_code_0_0_0_3.txt" not in index
    # Files are still written
    assert "inductor_output_code_0_0_0_3.txt" in result.files


def test_custom_header_is_injected_verbatim(vllm_log):
    header = "<div id='hdr'>Team <b>build</b></div>"
    result = parse_text(vllm_log().text(), ParseConfig(custom_header_html=header))
    assert header in result.files["index.html"]
    assert header in result.files["tlparse_index.html"]


def test_parse_path_reads_file(tmp_path, vllm_log):
    path = vllm_log().write(tmp_path / "trace.log")
    result = parse_path(path)
    assert result.has_vllm_artifacts
