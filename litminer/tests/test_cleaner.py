import pytest

from litminer.config import AnalysisConfig
from litminer.preprocessing.cleaner import Cleaner, remove_punctuation

SAMPLES = [
    "RT @ahab: The WHALE!!! http://t.co/xyz 1851",
    "Call me Ishmael. Some years ago--never mind how long precisely",
    "  via @starbuck   The   sea—the sea!  ",
    "HTTPS://EXAMPLE.COM/path?q=1 Whale's spout",
    "Café naïve élève",
    "",
]


class TestRemovePunctuation:
    def test_deletes_punctuation_and_symbols(self):
        assert remove_punctuation("whale! $5 + sea.") == "whale 5  sea"

    def test_dashes_become_spaces(self):
        assert remove_punctuation("whale—the sea-green") == "whale the sea green"

    def test_apostrophes_optional(self):
        assert remove_punctuation("whale's", keep_apostrophes=True) == "whale's"
        assert remove_punctuation("whale's", keep_apostrophes=False) == "whales"


class TestCleaner:
    def test_tweet_is_cleaned(self):
        assert Cleaner().clean("RT @ahab: The WHALE!!! http://t.co/xyz 1851") == "the whale"

    def test_url_removed_case_insensitively(self):
        assert Cleaner().clean("HTTPS://EXAMPLE.COM/path Whale") == "whale"

    def test_digits_removed(self):
        assert Cleaner().clean("Chapter 42 of 135") == "chapter of"

    def test_whitespace_collapsed_and_trimmed(self):
        assert Cleaner().clean("  the \n\t sea   ") == "the sea"

    def test_mentions_kept_when_disabled(self):
        cleaner = Cleaner(AnalysisConfig(strip_mentions=False))
        assert cleaner.clean("@ahab the whale") == "ahab the whale"

    def test_lowercase_can_be_disabled(self):
        cleaner = Cleaner(AnalysisConfig(lowercase=False))
        assert cleaner.clean("Moby Dick!") == "Moby Dick"

    def test_apostrophes_kept_by_default(self):
        assert Cleaner().clean("The whale's spout.") == "the whale's spout"

    def test_bytes_are_decoded(self):
        assert Cleaner().clean("Café".encode("utf-8")) == "café"

    @pytest.mark.parametrize("text", SAMPLES)
    def test_cleaning_is_idempotent(self, text):
        cleaner = Cleaner()
        once = cleaner.clean(text)
        assert cleaner.clean(once) == once

    def test_invalid_bytes_raise(self):
        with pytest.raises(UnicodeDecodeError):
            Cleaner().clean(b"\xff\xfe whale")

    def test_non_text_raises(self):
        with pytest.raises(TypeError):
            Cleaner().clean(42)


class TestCleanBatch:
    def test_failed_documents_are_excluded(self):
        batch = Cleaner().clean_batch(["The Whale!", b"\xff\xfe", 42, "Sea."])
        assert batch.texts == ["the whale", None, None, "sea"]
        assert sorted(batch.invalid) == [1, 2]
        assert batch.valid() == ["the whale", "sea"]
        assert batch.valid_indexes() == [0, 3]

    def test_empty_batch(self):
        batch = Cleaner().clean_batch([])
        assert batch.texts == []
        assert batch.invalid == {}

    def test_failure_is_logged(self, caplog):
        with caplog.at_level("WARNING"):
            Cleaner().clean_batch([b"\xff"])
        assert "Excluding document 0" in caplog.text
