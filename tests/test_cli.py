import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import timedelta
from pathlib import Path

from fuzzydrive.cli import build_parser, main
from fuzzydrive.config import AppConfig, AppContext, save_config
from fuzzydrive.models import FileRecord, Snapshot
from fuzzydrive.storage import SnapshotStore
from fuzzydrive.util.time import now_utc


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.context = AppContext(config_dir=Path(self._tmp.name))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv), context=self.context)
        return code, out.getvalue(), err.getvalue()

    def _seed(self, age: timedelta = timedelta(minutes=5)) -> None:
        files = [
            FileRecord(
                id="F1",
                name="Quarterly report.pdf",
                web_view_link="https://drive.google.com/file/d/F1/view",
                mime_type="application/pdf",
                parents=["P1"],
            ),
            FileRecord(
                id="F2",
                name="report",
                web_view_link="",
                mime_type="text/plain",
                parents=["P9"],
            ),
        ]
        SnapshotStore(self.context.snapshot_path).save(
            Snapshot(files=files, last_sync=now_utc() - age, folder_names={"P1": "Projects"})
        )

    def test_parser_requires_command(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_parser().parse_args([])

    def test_search_prints_items(self) -> None:
        self._seed()
        code, out, _ = self._run("search", "report")

        self.assertEqual(code, 0)
        items = json.loads(out)["items"]
        self.assertEqual([i["uid"] for i in items], ["F2", "F1"])

        exact, substring = items
        self.assertEqual(exact["score"], 1.0)
        self.assertEqual(exact["subtitle"], "Unknown folder")
        self.assertFalse(exact["valid"])
        self.assertEqual(substring["subtitle"], "Projects")
        self.assertEqual(substring["arg"], "https://drive.google.com/file/d/F1/view")
        self.assertEqual(substring["matched_ranges"], [[10, 16]])

    def test_search_without_snapshot(self) -> None:
        code, out, _ = self._run("search", "x")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"items": []})

    def test_check_sync_fresh_snapshot(self) -> None:
        self._seed()
        code, out, _ = self._run("check-sync")

        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["items"][0]["title"], "Already up to date")

    def test_init_without_client_credentials_fails(self) -> None:
        code, out, err = self._run("init")

        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("google_client_id", err)
        self.assertTrue(self.context.config_path.exists())

    def test_sync_without_folders_fails(self) -> None:
        save_config(
            self.context.config_path,
            AppConfig(google_client_id="cid", google_client_secret="secret"),
        )
        code, _, err = self._run("sync")

        self.assertEqual(code, 1)
        self.assertIn("target_folder_ids", err)


if __name__ == "__main__":
    unittest.main()
