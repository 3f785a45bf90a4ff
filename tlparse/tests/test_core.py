import os
import stat
import tempfile
import unittest
from pathlib import Path

from tlparse.core.errors import RankProcessingError, StrictModeError, TlparseError
from tlparse.core.serialization import write_output_tree
from tlparse.core.types import CompileId, Envelope
from tlparse.parsers.base import build_file_path


class TestCore(unittest.TestCase):
    def test_compile_id_rendering(self):
        self.assertEqual(str(CompileId(frame_id=0, frame_compile_id=1)), "[0/1]")
        self.assertEqual(str(CompileId(frame_id=0, frame_compile_id=1, attempt=2)), "[0/1_2]")
        self.assertEqual(str(CompileId(compiled_autograd_id=3, frame_id=0, frame_compile_id=1)), "[!3/0/1]")
        self.assertEqual(str(CompileId(frame_id=2)), "[2/-]")

    def test_compile_id_filename_part(self):
        self.assertEqual(CompileId(frame_id=0, frame_compile_id=1).as_filename_part(), "0_1_0")
        self.assertEqual(
            CompileId(compiled_autograd_id=2, frame_id=0, frame_compile_id=1, attempt=1).as_filename_part(),
            "ca2_0_1_1",
        )

    def test_compile_id_ordering(self):
        ids = [
            CompileId(frame_id=1, frame_compile_id=0),
            CompileId(compiled_autograd_id=0, frame_id=0, frame_compile_id=0),
            CompileId(frame_id=0, frame_compile_id=1),
            CompileId(frame_id=0, frame_compile_id=0),
        ]
        ordered = [str(c) for c in sorted(ids)]
        # Missing autograd id sorts before a present one
        self.assertEqual(ordered, ["[0/0]", "[0/1]", "[1/0]", "[!0/0/0]"])

    def test_envelope_without_compile_fields_has_no_compile_id(self):
        env = Envelope.model_validate({"artifact": {"name": "x"}})
        self.assertIsNone(env.compile_id())
        self.assertEqual(env.artifact.encoding, "string")

    def test_envelope_keeps_unknown_keys(self):
        env = Envelope.model_validate({"dynamo_start": {"stack": []}, "frame_id": 4, "frame_compile_id": 0})
        self.assertEqual(env.compile_id(), CompileId(frame_id=4, frame_compile_id=0))
        self.assertIn("dynamo_start", env.model_dump())

    def test_build_file_path(self):
        cid = CompileId(frame_id=0, frame_compile_id=0, attempt=0)
        self.assertEqual(build_file_path("inductor_output_code.txt", 42, cid), "inductor_output_code_0_0_0_42.txt")
        self.assertEqual(build_file_path("vllm_compilation_config.json", 7, None), "vllm_compilation_config_7.json")

    def test_strict_mode_error_lists_every_counter(self):
        err = StrictModeError("rank0.log", {"unknown": 2, "fail_json": 1})
        self.assertIsInstance(err, TlparseError)
        self.assertIn("unknown=2", str(err))
        self.assertIn("fail_json=1", str(err))
        self.assertIn("rank0.log", str(err))

    def test_rank_processing_error_names_rank_and_path(self):
        err = RankProcessingError(2, "/logs/r2.log", ValueError("boom"))
        self.assertEqual(err.rank, 2)
        self.assertIn("rank 2", str(err))
        self.assertIn("/logs/r2.log", str(err))

    @unittest.skipIf(os.name != "posix", "file modes are POSIX only")
    def test_written_files_follow_umask(self):
        umask = os.umask(0)
        os.umask(umask)
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "sub" / "index.html"
            write_output_tree(Path(tmp), {"sub/index.html": "<html></html>"})
            self.assertEqual(target.read_text(encoding="utf-8"), "<html></html>")
            self.assertEqual(stat.S_IMODE(target.stat().st_mode), 0o666 & ~umask)
            self.assertEqual(os.listdir(target.parent), ["index.html"])


if __name__ == "__main__":
    unittest.main()
