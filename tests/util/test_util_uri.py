import unittest

from docgateway.errors import InvalidUriError
from docgateway.util.uri import (
    DocumentUri,
    build_document_uri,
    build_document_uri_using_tree,
    build_tree_uri,
    get_document_id,
    get_tree_document_id,
    is_blank,
    is_tree_uri,
)

AUTH = "com.android.externalstorage.documents"


class TestDocumentUri(unittest.TestCase):
    def test_parse_tree_uri(self) -> None:
        text = f"content://{AUTH}/tree/primary%3AMusic"
        uri = DocumentUri.parse(text)
        self.assertEqual(uri.authority, AUTH)
        self.assertEqual(uri.tree_document_id, "primary:Music")
        self.assertIsNone(uri.document_id)
        self.assertTrue(is_tree_uri(uri))
        self.assertEqual(str(uri), text)

    def test_parse_document_in_tree(self) -> None:
        text = f"content://{AUTH}/tree/primary%3AMusic/document/primary%3AMusic%2Fa.pdf"
        uri = DocumentUri.parse(text)
        self.assertEqual(uri.tree_document_id, "primary:Music")
        self.assertEqual(uri.document_id, "primary:Music/a.pdf")
        self.assertFalse(is_tree_uri(uri))
        self.assertTrue(uri.is_tree_based)
        self.assertEqual(str(uri), text)

    def test_parse_single_document(self) -> None:
        uri = DocumentUri.parse(f"content://{AUTH}/document/primary%3Ax.pdf")
        self.assertIsNone(uri.tree_document_id)
        self.assertEqual(get_document_id(uri), "primary:x.pdf")
        self.assertFalse(uri.is_tree_based)

    def test_parse_rejects_malformed(self) -> None:
        bad = [
            "",
            "   ",
            "file:///sdcard/a.pdf",
            "content:///tree/primary%3A",
            f"content://{AUTH}/something/x",
            f"content://{AUTH}/tree/",
            f"content://{AUTH}/tree/x/document",
            f"content://{AUTH}/tree/x?y=1",
            f"content://{AUTH}/document/primary%3Ab%00",
            f"content://{AUTH}/tree/primary%3AMusic/document/primary%3AMusic%2Fa%00.pdf",
            f"content://{AUTH}/tree/primary%3AMu%0Asic",
            f"content://{AUTH}/document/primary%3Ab%7F",
        ]
        for value in bad:
            with self.subTest(value=value):
                with self.assertRaises(InvalidUriError):
                    DocumentUri.parse(value)

    def test_equality_uses_parsed_components(self) -> None:
        a = DocumentUri.parse(f"content://{AUTH}/tree/primary%3AMusic")
        b = build_tree_uri(AUTH, "primary:Music")
        self.assertEqual(a, b)
        self.assertNotEqual(a, build_document_uri(AUTH, "primary:Music"))

    def test_build_document_uri_using_tree(self) -> None:
        tree = build_tree_uri(AUTH, "primary:Music")
        doc = build_document_uri_using_tree(tree, get_tree_document_id(tree))
        self.assertEqual(doc.tree_document_id, "primary:Music")
        self.assertEqual(doc.document_id, "primary:Music")
        self.assertEqual(get_document_id(tree), "primary:Music")

    def test_get_tree_document_id_requires_tree(self) -> None:
        with self.assertRaises(InvalidUriError):
            get_tree_document_id(build_document_uri(AUTH, "primary:x"))

    def test_is_blank(self) -> None:
        self.assertTrue(is_blank(None))
        self.assertTrue(is_blank(""))
        self.assertTrue(is_blank(" \t"))
        self.assertFalse(is_blank("x"))


if __name__ == "__main__":
    unittest.main()
