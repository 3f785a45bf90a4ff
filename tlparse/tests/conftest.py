import json
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

GLOG_PREFIX = "I1015 10:00:00.000000 1234 torch/_logging/structured.py:28] "


class TraceLog:
    """Builds structured trace log text line by line."""

    def __init__(self, rank: Optional[int] = None):
        self.rank = rank
        self.lines: List[str] = []

    def record(self, envelope: dict, payload: Optional[str] = None) -> "TraceLog":
        env = dict(envelope)
        if self.rank is not None:
            env.setdefault("rank", self.rank)
        if payload is not None:
            env.setdefault("has_payload", "0123456789abcdef")
        self.lines.append(GLOG_PREFIX + json.dumps(env))
        if payload is not None:
            self.lines.extend("\t" + line for line in payload.split("\n"))
        return self

    @staticmethod
    def _compile_fields(compile_id: Optional[Tuple[int, int]]) -> dict:
        if compile_id is None:
            return {}
        return {"frame_id": compile_id[0], "frame_compile_id": compile_id[1], "attempt": 0}

    def artifact(self, name: str, payload: str, encoding: str = "string",
                 compile_id: Optional[Tuple[int, int]] = (0, 0)) -> "TraceLog":
        env = {"artifact": {"name": name, "encoding": encoding}}
        env.update(self._compile_fields(compile_id))
        return self.record(env, payload)

    def graph_dump(self, name: str, payload: str,
                   compile_id: Optional[Tuple[int, int]] = (0, 0)) -> "TraceLog":
        env = {"graph_dump": {"name": name}}
        env.update(self._compile_fields(compile_id))
        return self.record(env, payload)

    def compile_start(self, index: int, start: int, end: int,
                      submod_name: Optional[str] = None,
                      compile_id: Optional[Tuple[int, int]] = (0, 0)) -> "TraceLog":
        info = {
            "piecewise_index": index,
            "compile_range_start": start,
            "compile_range_end": end,
            "is_single_size": start == end,
            "is_cudagraph_capture_size": False,
        }
        if submod_name is not None:
            info["submod_name"] = submod_name
        return self.artifact("vllm_piecewise_compile_start", json.dumps(info),
                             encoding="json", compile_id=compile_id)

    def raw(self, line: str) -> "TraceLog":
        self.lines.append(line)
        return self

    def text(self) -> str:
        return "\n".join(self.lines) + "\n"

    def write(self, path: Path) -> Path:
        path = Path(path)
        path.write_text(self.text(), encoding="utf-8")
        return path


def vllm_trace(rank: Optional[int] = None) -> TraceLog:
    """
    A small vLLM piecewise compilation: config, a dynamo graph, the split
    graph, then two subgraphs each followed by their inductor output.
    """
    config = {"model": "facebook/opt-125m", "mode": "3", "backend": "inductor",
              "compile_sizes": "[8]", "use_inductor_graph_partition": False}
    log = TraceLog(rank=rank)
    log.artifact("vllm_compilation_config", json.dumps(config), encoding="json")   # line 1
    log.graph_dump("dynamo_output_graph", "class GraphModule(torch.nn.Module): ...")  # line 3
    log.graph_dump("vllm_piecewise_split_graph", "split graph body")  # line 5
    log.compile_start(0, 8, 8, submod_name="submod_0")  # line 7
    log.artifact("inductor_output_code", "def call(args): pass")  # line 9
    log.compile_start(1, 1, 16)  # line 11
    log.artifact("inductor_output_code", "def call(args): return args")  # line 13
    return log


@pytest.fixture
def trace_log():
    return TraceLog


@pytest.fixture
def vllm_log():
    return vllm_trace
