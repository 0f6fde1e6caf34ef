import contextlib
import io
import json
import os
import tempfile
import unittest
from pathlib import Path

from docgateway.cli import main


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        base = Path(self._td.name).resolve()
        self.root = base / "storage"
        (self.root / "Scores" / "Lent").mkdir(parents=True)
        (self.root / "Scores" / "kyrie.pdf").write_bytes(b"kyrie")
        (self.root / "Scores" / "Lent" / "stabat.pdf").write_bytes(b"stabat")
        self.permissions = str(base / "grants.json")

    def tearDown(self) -> None:
        self._td.cleanup()

    def _run(self, *argv, prompt=lambda _: ""):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(
                ["--root", str(self.root), "--permissions", self.permissions, *argv],
                prompt=prompt,
            )
        return code, out.getvalue(), err.getvalue()

    def test_pick_then_list_and_read(self) -> None:
        code, out, _ = self._run("pick", prompt=lambda _: "Scores")
        self.assertEqual(code, 0)
        tree = json.loads(out)
        self.assertTrue(tree.startswith("content://"))
        self.assertTrue(os.path.exists(self.permissions))

        code, out, _ = self._run("tree", tree)
        self.assertEqual(code, 0)
        self.assertEqual([d["displayName"] for d in json.loads(out)], ["kyrie.pdf", "stabat.pdf"])

        code, out, _ = self._run("children", tree)
        self.assertEqual([d["name"] for d in json.loads(out)], ["kyrie.pdf", "Lent"])

        target = str(Path(self._td.name) / "copy.pdf")
        code, out, _ = self._run("read", tree + "/document/primary%3AScores%2Fkyrie.pdf", "-o", target)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["size"], 5)
        self.assertEqual(Path(target).read_bytes(), b"kyrie")

        code, out, _ = self._run("grants")
        self.assertEqual([g["uri"] for g in json.loads(out)], [tree])

    def test_cancelled_pick(self) -> None:
        code, out, _ = self._run("pick")
        self.assertEqual(code, 1)
        self.assertIsNone(json.loads(out))

    def test_children_without_grant_reports_error(self) -> None:
        tree = "content://com.android.externalstorage.documents/tree/primary%3AScores"
        code, _, err = self._run("children", tree)
        self.assertEqual(code, 2)
        self.assertIn("list_failed", err)

    def test_persist_without_grant(self) -> None:
        tree = "content://com.android.externalstorage.documents/tree/primary%3AScores"
        code, out, _ = self._run("persist", tree)
        self.assertEqual(code, 1)
        self.assertFalse(json.loads(out))


if __name__ == "__main__":
    unittest.main()
