import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from fuzzydrive.controller import ListPage
from fuzzydrive.errors import ConfigurationMissingError, NotFoundError, RemoteFetchError
from fuzzydrive.models import FileRecord, Snapshot
from fuzzydrive.storage import SnapshotStore
from fuzzydrive.sync import SyncPipeline, sync_is_due
from fuzzydrive.util.mime import FOLDER_MIME

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _item(file_id: str, name: str, parent: str, **extra) -> dict:
    data = {
        "id": file_id,
        "name": name,
        "webViewLink": f"https://drive.google.com/file/d/{file_id}/view",
        "modifiedTime": "2025-01-01T00:00:00.000Z",
        "mimeType": "application/pdf",
        "parents": [parent],
    }
    data.update(extra)
    return data


class FakeRemote:
    def __init__(self) -> None:
        self.calls = []
        self.pages = {
            ("P1", None): ListPage(
                items=[
                    _item("F1", "report.pdf", "P1"),
                    _item("D1", "subfolder", "P1", mimeType=FOLDER_MIME),
                ],
                next_page_token="T2",
            ),
            ("P1", "T2"): ListPage(items=[_item("F2", "notes.txt", "P1")]),
            ("P2", None): ListPage(
                items=[
                    {"id": "F3", "name": "bare", "mimeType": "text/plain",
                     "modifiedTime": "2025-02-01T00:00:00Z"},
                ]
            ),
        }
        self.names = {"P1": "Projects"}
        self.fail_listing_for: Optional[str] = None

    def list_children(self, folder_id: str, page_token: Optional[str] = None) -> ListPage:
        self.calls.append(("list_children", folder_id, page_token))
        if folder_id == self.fail_listing_for:
            raise RemoteFetchError("HTTP error 500", details={"status_code": 500})
        return self.pages[(folder_id, page_token)]

    def get_metadata(self, file_id: str) -> dict:
        self.calls.append(("get_metadata", file_id))
        if file_id not in self.names:
            raise NotFoundError("not found")
        return {"id": file_id, "name": self.names[file_id], "mimeType": FOLDER_MIME}


class TestSyncPipeline(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = SnapshotStore(Path(self._tmp.name) / "drive_files.json")
        self.remote = FakeRemote()
        self.now = NOW

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _pipeline(self) -> SyncPipeline:
        return SyncPipeline(self.remote, self.store, clock=lambda: self.now)

    def test_sync_collects_files_pages_and_folder_names(self) -> None:
        files, folder_names = self._pipeline().sync(["P1", "P2"])

        self.assertEqual([f.id for f in files], ["F1", "F2", "F3"])
        self.assertEqual(folder_names, {"P1": "Projects"})
        self.assertEqual(
            [c for c in self.remote.calls if c[0] == "list_children"],
            [
                ("list_children", "P1", None),
                ("list_children", "P1", "T2"),
                ("list_children", "P2", None),
            ],
        )

    def test_sync_normalizes_records(self) -> None:
        files, _ = self._pipeline().sync(["P2"])
        bare = files[0]

        self.assertEqual(bare.web_view_link, "")
        self.assertEqual(bare.parents, [])
        self.assertEqual(bare.modified_time, datetime(2025, 2, 1, tzinfo=timezone.utc))

    def test_sync_persists_snapshot(self) -> None:
        files, _ = self._pipeline().sync(["P1", "P2"])

        snapshot = self.store.load()
        self.assertEqual(snapshot.files, files)
        self.assertEqual(snapshot.folder_names, {"P1": "Projects"})
        self.assertEqual(snapshot.last_sync, NOW)
        self.assertIsNone(snapshot.sync_token)

    def test_empty_folder_list_fails_without_side_effects(self) -> None:
        with self.assertRaises(ConfigurationMissingError):
            self._pipeline().sync([])
        self.assertEqual(self.remote.calls, [])
        self.assertFalse(self.store.path.exists())

    def test_listing_failure_leaves_previous_snapshot(self) -> None:
        old = Snapshot(files=[], last_sync=NOW - timedelta(days=1))
        self.store.save(old)
        self.remote.fail_listing_for = "P2"

        with self.assertRaises(RemoteFetchError):
            self._pipeline().sync(["P1", "P2"])

        self.assertEqual(self.store.load().last_sync, old.last_sync)

    def test_folder_name_failure_is_not_fatal(self) -> None:
        self.remote.names = {}
        files, folder_names = self._pipeline().sync(["P1"])
        self.assertEqual(len(files), 2)
        self.assertEqual(folder_names, {})

    def test_duplicate_ids_across_folders_are_kept_once(self) -> None:
        self.remote.pages[("P2", None)] = ListPage(items=[_item("F1", "report.pdf", "P2")])
        files, _ = self._pipeline().sync(["P1", "P2"])
        self.assertEqual([f.id for f in files], ["F1", "F2"])

    def test_sync_twice_is_idempotent(self) -> None:
        first, _ = self._pipeline().sync(["P1", "P2"])
        self.now = NOW + timedelta(minutes=5)
        second, _ = self._pipeline().sync(["P1", "P2"])

        self.assertEqual(
            [(f.id, f.name, f.web_view_link) for f in first],
            [(f.id, f.name, f.web_view_link) for f in second],
        )
        self.assertEqual(self.store.last_sync(), NOW + timedelta(minutes=5))


class TestCheckAndSync(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = SnapshotStore(Path(self._tmp.name) / "drive_files.json")
        self.remote = FakeRemote()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _seed(self, age: timedelta) -> None:
        record = FileRecord(id="OLD", name="old", web_view_link="", mime_type="text/plain")
        self.store.save(Snapshot(files=[record], last_sync=NOW - age))

    def test_recent_snapshot_skips_network(self) -> None:
        self._seed(timedelta(minutes=30))
        pipeline = SyncPipeline(self.remote, self.store, clock=lambda: NOW)

        self.assertFalse(pipeline.check_and_sync(["P1"]))
        self.assertEqual(self.remote.calls, [])
        self.assertEqual(self.store.last_sync(), NOW - timedelta(minutes=30))

    def test_stale_snapshot_runs_one_sync(self) -> None:
        self._seed(timedelta(minutes=90))
        pipeline = SyncPipeline(self.remote, self.store, clock=lambda: NOW)

        self.assertTrue(pipeline.check_and_sync(["P1"]))
        listing_roots = [c for c in self.remote.calls if c == ("list_children", "P1", None)]
        self.assertEqual(len(listing_roots), 1)
        self.assertEqual(self.store.last_sync(), NOW)
        self.assertEqual([f.id for f in self.store.files()], ["F1", "F2"])

    def test_missing_snapshot_runs_sync(self) -> None:
        pipeline = SyncPipeline(self.remote, self.store, clock=lambda: NOW)
        self.assertTrue(pipeline.check_and_sync(["P1"]))

    def test_sync_is_due_boundary(self) -> None:
        self._seed(timedelta(hours=1))
        self.assertTrue(sync_is_due(self.store, NOW))
        self.assertFalse(sync_is_due(self.store, NOW - timedelta(seconds=1)))


if __name__ == "__main__":
    unittest.main()
