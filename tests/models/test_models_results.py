import unittest

from docgateway.models import MethodResult


class TestMethodResult(unittest.TestCase):
    def test_success(self) -> None:
        r = MethodResult.success([1, 2])
        self.assertTrue(r.ok)
        self.assertEqual(r.value, [1, 2])
        self.assertIsNone(r.error_code)

    def test_success_with_none_value(self) -> None:
        r = MethodResult.success(None)
        self.assertEqual(r.status, "success")
        self.assertIsNone(r.value)

    def test_error(self) -> None:
        r = MethodResult.error("list_failed", "boom", {"uri": "u"})
        self.assertFalse(r.ok)
        self.assertEqual(r.status, "error")
        self.assertEqual(r.error_code, "list_failed")
        self.assertEqual(r.error_message, "boom")
        self.assertEqual(r.error_details, {"uri": "u"})

    def test_not_implemented(self) -> None:
        self.assertEqual(MethodResult.not_implemented().status, "not_implemented")


if __name__ == "__main__":
    unittest.main()
