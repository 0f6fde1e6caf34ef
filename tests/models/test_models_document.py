import unittest

from docgateway.models import DocumentDescriptor, DocumentNode, PermissionGrant
from docgateway.util.uri import build_document_uri

AUTH = "com.android.externalstorage.documents"


def _node(name, *, is_dir=False, length=10, mime="application/pdf"):
    return DocumentNode(
        uri=build_document_uri(AUTH, f"primary:{name or 'x'}"),
        name=name,
        mime_type=mime,
        is_directory=is_dir,
        is_file=not is_dir,
        length=length,
    )


class TestDocumentDescriptor(unittest.TestCase):
    def test_placeholder_used_when_name_missing(self) -> None:
        for name in (None, ""):
            with self.subTest(name=name):
                d = DocumentDescriptor.from_node(_node(name), placeholder="Sem nome")
                self.assertEqual(d.name, "Sem nome")

    def test_size_absent_for_unknown_length_and_directories(self) -> None:
        self.assertIsNone(DocumentDescriptor.from_node(_node("a", length=-1), placeholder="?").size)
        self.assertIsNone(
            DocumentDescriptor.from_node(_node("d", is_dir=True, length=4096), placeholder="?").size
        )
        self.assertEqual(DocumentDescriptor.from_node(_node("a", length=0), placeholder="?").size, 0)

    def test_child_record_shape(self) -> None:
        d = DocumentDescriptor.from_node(_node("a.pdf"), placeholder="?")
        self.assertEqual(
            d.to_child_record(),
            {
                "uri": f"content://{AUTH}/document/primary%3Aa.pdf",
                "name": "a.pdf",
                "isDirectory": False,
                "isFile": True,
                "mimeType": "application/pdf",
            },
        )

    def test_tree_record_shape(self) -> None:
        d = DocumentDescriptor.from_node(_node("a.pdf", length=7), placeholder="?")
        record = d.to_tree_record()
        self.assertEqual(set(record), {"displayName", "uri", "size", "mimeType"})
        self.assertEqual(record["displayName"], "a.pdf")
        self.assertEqual(record["size"], 7)

    def test_sort_key_is_case_insensitive(self) -> None:
        d = DocumentDescriptor.from_node(_node("Zebra"), placeholder="?")
        self.assertEqual(d.sort_key, "zebra")


class TestPermissionGrant(unittest.TestCase):
    def test_dict_round_trip(self) -> None:
        grant = PermissionGrant(uri="content://a/tree/x", read=True, persisted_time=5)
        self.assertEqual(PermissionGrant.from_dict(grant.to_dict()), grant)

    def test_from_dict_requires_uri(self) -> None:
        with self.assertRaises(ValueError):
            PermissionGrant.from_dict({"read": True})


if __name__ == "__main__":
    unittest.main()
