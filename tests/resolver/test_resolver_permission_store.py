import json
import os
import tempfile
import unittest

from docgateway.errors import ProviderIOError
from docgateway.resolver import PermissionStore

URI = "content://com.android.externalstorage.documents/tree/primary%3AScores"


class TestPermissionStoreInMemory(unittest.TestCase):
    def test_put_is_idempotent(self) -> None:
        store = PermissionStore()
        first = store.put(URI, read=True)
        second = store.put(URI, read=True)
        self.assertIs(first, second)
        self.assertEqual(len(store.list_grants()), 1)
        self.assertGreater(first.persisted_time, 0)

    def test_put_widens_existing_grant(self) -> None:
        store = PermissionStore()
        store.put(URI, read=True)
        grant = store.put(URI, read=False, write=True)
        self.assertTrue(grant.read)
        self.assertTrue(grant.write)
        self.assertEqual(len(store.list_grants()), 1)

    def test_get_unknown_is_none(self) -> None:
        self.assertIsNone(PermissionStore().get(URI))


class TestPermissionStoreFile(unittest.TestCase):
    def test_grants_survive_reload(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "nested", "grants.json")
            PermissionStore(path).put(URI, read=True)

            reloaded = PermissionStore(path)
            grant = reloaded.get(URI)
            self.assertIsNotNone(grant)
            assert grant is not None
            self.assertTrue(grant.read)
            self.assertFalse(grant.write)

    def test_malformed_entries_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "grants.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"grants": [{"read": True}, {"uri": URI, "read": True}]}, f)

            store = PermissionStore(path)
            self.assertEqual([g.uri for g in store.list_grants()], [URI])

    def test_corrupt_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "grants.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write("{not json")

            with self.assertRaises(ProviderIOError):
                PermissionStore(path)

    def test_unwritable_directory_raises_and_keeps_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            blocker = os.path.join(td, "blocker")
            with open(blocker, "w", encoding="utf-8") as f:
                f.write("not a directory")
            store = PermissionStore(os.path.join(blocker, "sub", "grants.json"))

            with self.assertRaises(ProviderIOError):
                store.put(URI, read=True)
            self.assertIsNone(store.get(URI))
            self.assertEqual(store.list_grants(), [])

    def test_failed_write_leaves_no_temp_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "grants.json")
            store = PermissionStore(path)
            os.mkdir(path)

            with self.assertRaises(ProviderIOError):
                store.put(URI, read=True)
            self.assertEqual(os.listdir(td), ["grants.json"])


if __name__ == "__main__":
    unittest.main()
