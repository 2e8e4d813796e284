import unittest

from unfilter.utils.validators import client_identifier, is_valid_origin, mask_secret


class TestClientIdentifier(unittest.TestCase):
    def test_first_forwarded_hop_wins(self):
        headers = {"x-forwarded-for": " 203.0.113.7 , 10.0.0.1"}
        self.assertEqual(client_identifier(headers, "10.0.0.1"), "203.0.113.7")

    def test_empty_forwarded_for_falls_back_to_peer(self):
        self.assertEqual(client_identifier({"x-forwarded-for": ""}, " 192.0.2.4 "), "192.0.2.4")
        self.assertEqual(client_identifier({"x-forwarded-for": " , 10.0.0.1"}, "192.0.2.4"), "192.0.2.4")
        self.assertEqual(client_identifier({}, "192.0.2.4"), "192.0.2.4")

    def test_no_forwarded_for_and_no_peer_is_unknown(self):
        self.assertEqual(client_identifier({}), "unknown")
        self.assertEqual(client_identifier({"x-forwarded-for": "   "}, ""), "unknown")


class TestOriginAndMasking(unittest.TestCase):
    def test_valid_origins(self):
        for value in ("*", "https://unfilter-the-hr.vercel.app", "http://localhost:3000", "https://a.example/"):
            self.assertTrue(is_valid_origin(value), value)

    def test_invalid_origins(self):
        for value in ("", "unfilter-the-hr.vercel.app", "ftp://a.example", "https://a.example/path"):
            self.assertFalse(is_valid_origin(value), value)

    def test_mask_secret(self):
        self.assertEqual(mask_secret("sk-live"), "present")
        self.assertEqual(mask_secret(True), "present")
        self.assertEqual(mask_secret(None), "missing")
        self.assertEqual(mask_secret(""), "missing")


if __name__ == "__main__":
    unittest.main()
