import argparse
import json
from pathlib import Path

import pytest


def make_sample_docs(tmp_path):
    """Create sample analysis JSON files for testing."""
    docs = [
        {
            "source_path": "moby.txt",
            "index": 0,
            "title": "CHAPTER 1. Loomings.",
            "raw_text": "whale sea happy whale",
            "tokens": ["whale", "sea", "happy", "whale"],
            "filtered_tokens": ["whale", "sea", "happy", "whale"],
            "frequencies": {"whale": 2, "sea": 1, "happy": 1},
            "lexical": {"tokens": 4, "types": 3, "type_token_ratio": 0.75},
            "polarity": "positive",
            "polarity_score": 0.6,
            "emotion": "joy",
            "emotion_scores": {"joy": 0.9, "sadness": 0.1},
        },
        {
            "source_path": "moby.txt",
            "index": 1,
            "title": "CHAPTER 2. The Carpet-Bag.",
            "raw_text": "whale terrified sea sea",
            "tokens": ["whale", "terrified", "sea", "sea"],
            "filtered_tokens": ["whale", "terrified", "sea", "sea"],
            "frequencies": {"whale": 1, "terrified": 1, "sea": 2},
            "lexical": {"tokens": 4, "types": 3, "type_token_ratio": 0.75},
            "polarity": "negative",
            "polarity_score": -0.4,
            "emotion": "fear",
            "emotion_scores": {"fear": 0.8, "joy": 0.2},
        },
        {
            "source_path": "moby.txt",
            "index": 2,
            "title": "CHAPTER 3. The Spouter-Inn.",
            "raw_text": "sad inn whale",
            "tokens": ["sad", "inn", "whale"],
            "filtered_tokens": ["sad", "inn", "whale"],
            "frequencies": {"sad": 1, "inn": 1, "whale": 1},
            "lexical": {"tokens": 3, "types": 3, "type_token_ratio": 1.0},
            "polarity": "negative",
            "polarity_score": -0.5,
            "emotion": "sadness",
            "emotion_scores": {"sadness": 1.0},
        },
    ]

    for i, doc in enumerate(docs):
        path = tmp_path / f"moby_{i + 1:04d}.json"
        path.write_text(json.dumps(doc, ensure_ascii=False), encoding="utf-8")

    return docs


class TestHTMLReport:
    def test_generate_html_report_creates_file(self, tmp_path):
        from litminer.visualizers.html_report import generate_html_report

        docs = make_sample_docs(tmp_path)
        report_path = generate_html_report(docs, tmp_path / "output")

        assert report_path.exists()
        assert report_path.suffix == ".html"

    def test_html_report_contains_expected_content(self, tmp_path):
        from litminer.visualizers.html_report import generate_html_report

        docs = make_sample_docs(tmp_path)
        report_path = generate_html_report(docs, tmp_path / "output", words=["whale", "sea"])
        content = report_path.read_text(encoding="utf-8")

        assert "litminer" in content
        assert "Relative Frequency by Chapter" in content
        assert "Emotion Distribution" in content

    def test_html_report_with_empty_docs(self, tmp_path):
        from litminer.visualizers.html_report import generate_html_report

        report_path = generate_html_report([], tmp_path / "output")
        assert report_path.exists()

    def test_fallback_report_lists_documents(self, tmp_path):
        from litminer.visualizers.html_report import _generate_fallback_html

        docs = make_sample_docs(tmp_path)
        content = _generate_fallback_html(docs, tmp_path / "output").read_text()
        assert "CHAPTER 2. The Carpet-Bag." in content
        assert "fear" in content

    def test_summary_stats(self, tmp_path):
        from litminer.visualizers.html_report import _compute_summary_stats

        stats = _compute_summary_stats(make_sample_docs(tmp_path))
        assert stats == {
            "total_docs": 3,
            "total_tokens": 11,
            "unique_tokens": 6,
            "labeled_docs": 3,
        }


class TestStaticFigures:
    def test_generate_figures_creates_files(self, tmp_path):
        from litminer.visualizers.static_figures import generate_figures

        docs = make_sample_docs(tmp_path)
        figure_paths = generate_figures(docs, tmp_path / "output", dpi=50)

        assert len(figure_paths) > 0
        for path in figure_paths:
            assert path.exists()
            assert path.stat().st_size > 0

    def test_expected_figures(self, tmp_path):
        from litminer.visualizers.static_figures import generate_figures

        docs = make_sample_docs(tmp_path)
        figure_paths = generate_figures(docs, tmp_path / "output", dpi=50)
        names = {p.stem for p in figure_paths}

        assert names == {
            "token_frequency",
            "relative_frequency",
            "frequency_scatter",
            "dispersion",
            "lexical_variety",
            "label_distribution",
        }
        assert {p.suffix for p in figure_paths} == {".png", ".pdf"}

    def test_generate_figures_empty_docs(self, tmp_path):
        from litminer.visualizers.static_figures import generate_figures

        assert generate_figures([], tmp_path / "output", dpi=50) == []

    def test_empty_chapter_bar_is_undefined(self):
        import math

        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from litminer.visualizers.static_figures import (
            _create_relative_frequency_figure,
            docs_matrix,
        )

        matrix = docs_matrix(
            [
                {"title": "CHAPTER 1", "frequencies": {"whale": 1, "sea": 1}},
                {"title": "CHAPTER 2", "frequencies": {}},
            ]
        )
        fig = _create_relative_frequency_figure(matrix, ["whale"], per=100.0)
        heights = [bar.get_height() for bar in fig.axes[0].patches]
        plt.close(fig)

        assert heights[0] == 50.0
        assert math.isnan(heights[1])

    def test_docs_matrix_uses_payload_frequencies(self, tmp_path):
        from litminer.visualizers.static_figures import docs_matrix

        matrix = docs_matrix(make_sample_docs(tmp_path))
        assert matrix.labels[0] == "CHAPTER 1. Loomings."
        assert matrix.column("whale") == [2, 1, 1]


class TestWordClouds:
    def test_label_frequencies_pools_by_emotion(self, tmp_path):
        from litminer.visualizers.wordclouds import label_frequencies

        pooled = label_frequencies(make_sample_docs(tmp_path))
        assert set(pooled) == {"joy", "fear", "sadness"}
        assert pooled["fear"]["sea"] == 2

    def test_generate_wordclouds(self, tmp_path):
        from litminer.visualizers.wordclouds import generate_wordclouds

        paths = generate_wordclouds(
            make_sample_docs(tmp_path), tmp_path / "output", width=200, height=100
        )
        names = sorted(p.name for p in paths)
        assert names == [
            "wordcloud.png",
            "wordcloud_emotion_fear.png",
            "wordcloud_emotion_joy.png",
            "wordcloud_emotion_sadness.png",
        ]
        assert all(p.exists() for p in paths)


class TestVisualizerIntegration:
    def test_visualize_command_integration(self, tmp_path):
        from litminer.cli.main import cmd_visualize
        from litminer.config import AnalysisConfig

        make_sample_docs(tmp_path)
        output_dir = tmp_path / "output"

        args = argparse.Namespace(
            input=tmp_path,
            output=output_dir,
            html=True,
            figures=True,
            wordcloud=False,
            dpi=50,
            words="whale,sea",
        )

        result = cmd_visualize(args, AnalysisConfig())

        assert result == 0
        assert (output_dir / "report.html").exists()
        assert (output_dir / "frequency_scatter.png").exists()
