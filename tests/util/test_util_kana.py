import unittest

from fuzzydrive.util.kana import kana_to_romaji_keywords
from fuzzydrive.util.mime import FOLDER_MIME, is_folder


class TestKanaKeywords(unittest.TestCase):
    def test_katakana_run(self) -> None:
        self.assertEqual(kana_to_romaji_keywords("テスト資料"), ["tesuto"])

    def test_hiragana_run(self) -> None:
        self.assertEqual(kana_to_romaji_keywords("さくら"), ["sakura"])

    def test_non_kana_splits_runs(self) -> None:
        self.assertEqual(
            kana_to_romaji_keywords("かい議のメモ"),
            ["kai", "nomemo"],
        )

    def test_duplicates_are_removed(self) -> None:
        self.assertEqual(kana_to_romaji_keywords("ねこ_ねこ"), ["neko"])

    def test_no_kana(self) -> None:
        self.assertEqual(kana_to_romaji_keywords("report.pdf"), [])
        self.assertEqual(kana_to_romaji_keywords(""), [])


class TestMime(unittest.TestCase):
    def test_is_folder(self) -> None:
        self.assertTrue(is_folder(FOLDER_MIME))
        self.assertFalse(is_folder("text/plain"))


if __name__ == "__main__":
    unittest.main()
