import unittest

from storeit.utils import (
    convert_file_size,
    generate_password,
    get_file_type,
    get_file_types_params,
    parse_sort,
)


class UtilsTests(unittest.TestCase):
    def test_get_file_type(self):
        self.assertEqual(get_file_type("a.PDF"), ("document", "pdf"))
        self.assertEqual(get_file_type("a.webp"), ("image", "webp"))
        self.assertEqual(get_file_type("a.mkv"), ("video", "mkv"))
        self.assertEqual(get_file_type("a.flac"), ("audio", "flac"))
        self.assertEqual(get_file_type("archive.tar.gz"), ("other", "gz"))
        self.assertEqual(get_file_type("Makefile"), ("other", ""))

    def test_get_file_types_params(self):
        self.assertEqual(get_file_types_params("media"), ["video", "audio"])
        self.assertEqual(get_file_types_params("others"), ["other"])
        self.assertEqual(get_file_types_params("unknown"), ["document"])

    def test_parse_sort(self):
        self.assertEqual(parse_sort("name-asc"), ("name", "asc"))
        self.assertEqual(parse_sort("$updatedAt-desc"), ("$updatedAt", "desc"))
        self.assertEqual(parse_sort(None), ("$createdAt", "desc"))
        self.assertEqual(parse_sort("owner-asc"), ("$createdAt", "desc"))
        self.assertEqual(parse_sort("name-sideways"), ("$createdAt", "desc"))

    def test_convert_file_size(self):
        self.assertEqual(convert_file_size(512), "512 Bytes")
        self.assertEqual(convert_file_size(1536), "1.5 KB")
        self.assertEqual(convert_file_size(3 * 1024 * 1024), "3.0 MB")
        self.assertEqual(convert_file_size(2 * 1024 * 1024 * 1024), "2.0 GB")

    def test_generate_password(self):
        password = generate_password()
        self.assertEqual(len(password), 13)
        self.assertTrue(password.endswith("A1!"))
        self.assertNotEqual(password, generate_password())


if __name__ == "__main__":
    unittest.main()
