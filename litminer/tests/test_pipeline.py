import json
from pathlib import Path

import pytest

from litminer.config import AnalysisConfig

NOVEL = """CHAPTER 1. Loomings.

Call me Ishmael. I was happy and delighted to see the whale and the sea.

CHAPTER 2. The Carpet-Bag.

The whale, the whale! I was terrified of the whale's jaw on the sea.

CHAPTER 3. The Spouter-Inn.

A sad and gloomy night at the inn.
"""

OFFLINE = ["frequency", "lexical", "emotion"]


def make_text(path: Path, text: str = NOVEL) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def make_pipeline(tmp_path, **kwargs):
    from litminer.pipeline import Pipeline

    kwargs.setdefault("analyzers", OFFLINE)
    kwargs.setdefault("config", AnalysisConfig(cache_enabled=False))
    return Pipeline(output_dir=tmp_path / "output", **kwargs)


class TestPipeline:
    def test_pipeline_runs_on_single_text(self, tmp_path):
        p = make_pipeline(tmp_path)
        results = p.run([make_text(tmp_path / "moby.txt")])
        assert len(results) == 1
        assert results[0].frequencies["whale"] == 3

    def test_chapters_become_documents_in_order(self, tmp_path):
        p = make_pipeline(tmp_path)
        results = p.run([make_text(tmp_path / "moby.txt")], split="chapters")
        assert [r.tokenized.title for r in results] == [
            "CHAPTER 1. Loomings.",
            "CHAPTER 2. The Carpet-Bag.",
            "CHAPTER 3. The Spouter-Inn.",
        ]
        assert [r.emotion for r in results] == ["joy", "fear", "sadness"]

    def test_output_json_is_created(self, tmp_path):
        p = make_pipeline(tmp_path)
        p.run([make_text(tmp_path / "moby.txt")], split="chapters")
        output_dir = tmp_path / "output"
        assert (output_dir / "corpus.json").exists()
        assert sorted(f.name for f in output_dir.glob("moby_*.json")) == [
            "moby_0001.json",
            "moby_0002.json",
            "moby_0003.json",
        ]

    def test_output_json_has_expected_keys(self, tmp_path):
        p = make_pipeline(tmp_path)
        p.run([make_text(tmp_path / "moby.txt")])
        data = json.loads((tmp_path / "output" / "moby_0001.json").read_text())
        for key in ["source_path", "index", "title", "tokens", "filtered_tokens",
                    "frequencies", "lexical", "polarity", "emotion", "emotion_scores"]:
            assert key in data
        assert data["frequencies"]["whale"] == 3

    def test_corpus_json_holds_matrix(self, tmp_path):
        p = make_pipeline(tmp_path)
        p.run([make_text(tmp_path / "moby.txt")], split="chapters")
        data = json.loads((tmp_path / "output" / "corpus.json").read_text())
        assert len(data["rows"]) == 3
        assert data["rows"][1]["whale"] == 2
        assert data["config"]["per"] == 100.0
        assert p.matrix.shape[0] == 3

    def test_chapter_counts_sum_to_whole_text(self, tmp_path):
        source = make_text(tmp_path / "moby.txt")
        chapters = make_pipeline(tmp_path).run([source], split="chapters")
        whole = make_pipeline(tmp_path).run([source])

        combined = chapters[0].frequencies
        for doc in chapters[1:]:
            combined = combined.merge(doc.frequencies)
        for token in ["whale", "sea", "happy", "terrified"]:
            assert combined[token] == whole[0].frequencies[token]

    def test_pipeline_records_none_for_failed_source(self, tmp_path):
        p = make_pipeline(tmp_path)
        results = p.run([tmp_path / "missing.txt", make_text(tmp_path / "moby.txt")])
        assert results[0] is None
        assert results[1] is not None

    def test_tokenize_only_mode(self, tmp_path):
        p = make_pipeline(tmp_path, analyzers=[])
        results = p.run([make_text(tmp_path / "moby.txt")])
        assert results[0].frequencies is None
        assert results[0].emotion is None
        assert results[0].tokenized.tokens

    def test_unknown_analyzer_raises(self, tmp_path):
        with pytest.raises(ValueError):
            make_pipeline(tmp_path, analyzers=["semantic"])

    def test_unavailable_classifier_is_skipped(self, tmp_path):
        from litminer.classifiers import EmotionClassifier
        from unittest.mock import patch

        with patch.object(EmotionClassifier, "is_available", return_value=False):
            p = make_pipeline(tmp_path)
        results = p.run([make_text(tmp_path / "moby.txt")])
        assert results[0].emotion is None
        assert results[0].lexical["tokens"] > 0

    def test_classifier_failure_at_run_time_is_skipped(self, tmp_path):
        from litminer.classifiers import VaderClassifier
        from unittest.mock import PropertyMock, patch

        p = make_pipeline(tmp_path, analyzers=["frequency", "polarity"])
        with patch.object(
            VaderClassifier,
            "analyzer",
            new_callable=PropertyMock,
            side_effect=LookupError("vader_lexicon not found"),
        ):
            results = p.run([make_text(tmp_path / "moby.txt")])

        assert results[0].polarity is None
        assert results[0].frequencies["whale"] == 3
        assert (tmp_path / "output" / "moby_0001.json").exists()

    def test_empty_document_writes_strict_json(self, tmp_path):
        p = make_pipeline(tmp_path, analyzers=["frequency", "lexical"])
        results = p.run([make_text(tmp_path / "blank.txt", "   \n")])
        assert results[0].lexical["tokens"] == 0

        text = (tmp_path / "output" / "blank_0001.json").read_text()
        assert "NaN" not in text
        data = json.loads(text)
        assert data["lexical"]["type_token_ratio"] is None
        assert data["lexical"]["hapax_count"] == 0

    def test_clean_drops_undecodable_documents(self, tmp_path):
        from litminer.analyzers.base import Corpus, Document

        p = make_pipeline(tmp_path, clean=True)
        corpus = Corpus(
            source="tweets.txt",
            documents=[
                Document(source="tweets.txt", index=0, text="RT @ahab: Happy day! http://t.co/x"),
                Document(source="tweets.txt", index=1, text=b"\xff\xfe"),
                Document(source="tweets.txt", index=2, text="So sad..."),
            ],
        )
        docs = p.process_corpus(corpus)
        assert [d.tokenized.index for d in docs] == [0, 2]
        assert docs[0].tokenized.tokens == ["happy", "day"]
        assert [d.emotion for d in docs] == ["joy", "sadness"]

    def test_lines_split_gives_one_document_per_line(self, tmp_path):
        p = make_pipeline(tmp_path)
        source = make_text(tmp_path / "tweets.txt", "happy tweet\n\nsad tweet\n")
        results = p.run([source], split="lines")
        assert [r.emotion for r in results] == ["joy", "sadness"]


class TestPayloads:
    def test_load_payloads_restores_chapter_order(self, tmp_path):
        from litminer.pipeline import load_payloads

        p = make_pipeline(tmp_path)
        p.run([make_text(tmp_path / "moby.txt")], split="chapters")
        paths = sorted((tmp_path / "output").glob("*.json"), reverse=True)
        docs = load_payloads(paths)
        assert [d["index"] for d in docs] == [0, 1, 2]

    def test_load_payloads_skips_unreadable_files(self, tmp_path):
        from litminer.pipeline import load_payloads

        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        assert load_payloads([bad]) == []

    def test_payload_round_trip(self, tmp_path):
        from litminer.pipeline import document_payload, payload_to_document

        p = make_pipeline(tmp_path)
        doc = p.run([make_text(tmp_path / "moby.txt")])[0]
        restored = payload_to_document(json.loads(json.dumps(document_payload(doc))))
        assert restored.frequencies == doc.frequencies
        assert restored.emotion == doc.emotion
        assert restored.tokenized.tokens == doc.tokenized.tokens
