from tlparse.stats import ParseStats
from tlparse.tokenizer import LogTokenizer


def tokenize(text):
    stats = ParseStats()
    records = list(LogTokenizer(stats).tokenize(text.splitlines(keepends=True)))
    return records, stats


def test_payload_lines_attach_to_preceding_record(trace_log):
    log = trace_log().artifact("a", "line one\nline two").graph_dump("g", "body")
    records, stats = tokenize(log.text())

    assert [r.lineno for r in records] == [1, 4]
    assert records[0].payload == "line one\nline two"
    assert records[0].artifact.name == "a"
    assert records[1].graph_dump.name == "g"
    assert stats.fail_glog == 0
    assert stats.fail_json == 0


def test_rank_prefix_and_rank_field(trace_log):
    log = trace_log(rank=3).artifact("a", "x")
    records, _ = tokenize("[rank3]:" + log.text())
    assert len(records) == 1
    assert records[0].rank == 3


def test_bad_lines_are_counted(trace_log):
    log = trace_log()
    log.raw("not a glog line")
    log.raw("\torphan payload")
    log.raw("I1015 10:00:00.000000 1234 structured.py:28] {not json")
    log.artifact("ok", "payload")
    records, stats = tokenize(log.text())

    assert [r.artifact.name for r in records] == ["ok"]
    # The orphan payload line belongs to the non-glog line above it
    assert stats.fail_glog == 1
    assert stats.fail_json == 1


def test_orphan_payload_at_start_is_counted():
    _, stats = tokenize("\tstray\n")
    assert stats.fail_glog == 1


def test_blank_lines_are_ignored(trace_log):
    log = trace_log().artifact("a", "x").raw("").artifact("b", "y")
    records, stats = tokenize(log.text())
    assert [r.artifact.name for r in records] == ["a", "b"]
    assert stats.fail_glog == 0


def test_deeply_nested_envelope_is_counted_as_bad_json(trace_log):
    log = trace_log()
    log.raw("I1015 10:00:00.000000 1234 structured.py:28] " + "[" * 100000 + "]" * 100000)
    log.artifact("ok", "payload")
    records, stats = tokenize(log.text())

    assert [r.artifact.name for r in records] == ["ok"]
    assert stats.fail_json == 1
