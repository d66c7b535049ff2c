# tests/test_text_normalizer.py
import unittest
from autoscroll.TextNormalizer import TextNormalizer


class TestTextNormalization(unittest.TestCase):
    """Test the TextNormalizer class for text normalization."""

    def setUp(self):
        self.text_normalizer = TextNormalizer()

    def test_normalization(self):
        result = self.text_normalizer.normalize_text("Hello.")
        self.assertEqual(result, "hello")

        result = self.text_normalizer.normalize_text("HELLO, World!")
        self.assertEqual(result, "hello world")

        result = self.text_normalizer.normalize_text("hello  world")
        self.assertEqual(result, "hello world")

        result = self.text_normalizer.normalize_text("  hello   world  ")
        self.assertEqual(result, "hello world")

        result = self.text_normalizer.normalize_text("Track 42, take 7")
        self.assertEqual(result, "track 42 take 7")

    def test_hyphenated_words_are_joined(self):
        """Hyphens are deleted, not treated as separators."""
        self.assertEqual(self.text_normalizer.tokenize("Mudam-se os tempos"), ["mudamse", "os", "tempos"])

    def test_accented_letters_are_deleted(self):
        """Non-ASCII letters disappear instead of being folded."""
        self.assertEqual(self.text_normalizer.tokenize("mudança"), ["mudana"])
        self.assertEqual(self.text_normalizer.tokenize("Todo o mundo é composto"), ["todo", "o", "mundo", "composto"])
        self.assertEqual(self.text_normalizer.tokenize("чёрный кот"), [])

    def test_tabs_and_newlines_glue_words(self):
        """Only the space character separates tokens."""
        self.assertEqual(self.text_normalizer.tokenize("hello\tworld"), ["helloworld"])

    def test_edge_cases(self):
        self.assertEqual(self.text_normalizer.tokenize(""), [])
        self.assertEqual(self.text_normalizer.tokenize("!?.,"), [])
        self.assertEqual(self.text_normalizer.tokenize("   "), [])
        self.assertEqual(self.text_normalizer.normalize_text("  !?  "), "")

    def test_tokens_contain_only_ascii_alphanumerics(self):
        tokens = self.text_normalizer.tokenize("Ça va? Très bien, 100% (merci)!")
        self.assertTrue(tokens)
        for token in tokens:
            self.assertRegex(token, r"^[a-z0-9]+$")

    def test_normalization_is_idempotent(self):
        for text in ("Mudam-se os tempos, mudam-se as vontades,", "  E, afora este  ", "Que não se muda já como soía."):
            once = self.text_normalizer.normalize_text(text)
            self.assertEqual(self.text_normalizer.normalize_text(once), once)

    def test_tokenize_lines_matches_per_line_concatenation(self):
        lines = ["Do mal ficam as mágoas,", "", "  E do bem  ", "!!!"]
        per_line = [token for line in lines for token in self.text_normalizer.tokenize(line)]
        self.assertEqual(self.text_normalizer.tokenize_lines(lines), per_line)


if __name__ == '__main__':
    unittest.main()
