#!/usr/bin/env python3
"""
litminer Demo - Full pipeline run with timing and analytics.

Usage:
    python3 demo_pipeline.py
"""

import time
from pathlib import Path
from datetime import datetime


class Timer:
    def __init__(self, name):
        self.name = name
        self.start = None
        self.elapsed = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed = time.perf_counter() - self.start


SAMPLE_NOVEL = """*** START OF THE PROJECT GUTENBERG EBOOK SAMPLE ***

CHAPTER 1. Loomings.

Call me Ishmael. Some years ago, never mind how long precisely, I was happy
to go to sea. Whenever it is a damp, drizzly November in my soul, I take to
the ship. The whale, the great whale, was the grand idea.

CHAPTER 2. The Carpet-Bag.

I stuffed a shirt or two into my old carpet-bag. The sea was grey and I was
terrified of the whale's jaw. Whale upon whale rose out of the sea.

CHAPTER 3. The Spouter-Inn.

A sad and gloomy inn. No whale here, but the sea outside was loud.

CHAPTER 4. The Counterpane.

Upon waking next morning I was shocked to find the harpooneer's arm over
me. The whale and the sea and the ship and the whale again.

*** END OF THE PROJECT GUTENBERG EBOOK SAMPLE ***
"""

SAMPLE_TWEETS = """RT @ahab: The WHALE is out there!!! http://t.co/abc123 #pequod
Such a happy day on the sea @starbuck :)
via @stubb so sad the ship is leaking... 2 pumps left
The whale's spout is beautiful https://example.com/spout
"""


def create_sample_texts(output_dir: Path):
    """Write a small Gutenberg-style novel and a tweet file."""
    output_dir.mkdir(parents=True, exist_ok=True)
    novel = output_dir / "sample_novel.txt"
    tweets = output_dir / "sample_tweets.txt"
    novel.write_text(SAMPLE_NOVEL, encoding="utf-8")
    tweets.write_text(SAMPLE_TWEETS, encoding="utf-8")
    return novel, tweets


def print_section(title):
    print(f"\n{'=' * 60}")
    print(f" {title}")
    print(f"{'=' * 60}")


def format_time(seconds):
    if seconds < 0.001:
        return f"{seconds * 1000000:.0f}µs"
    elif seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    else:
        return f"{seconds:.2f}s"


def format_stats(stats, indent=2):
    indent_str = " " * indent
    lines = []
    for k, v in stats.items():
        if isinstance(v, float):
            lines.append(f"{indent_str}{k}: {v:.4f}")
        else:
            lines.append(f"{indent_str}{k}: {v}")
    return "\n".join(lines)


def run_demo():
    from litminer.config import AnalysisConfig

    print_section("LITMINER PIPELINE DEMO")
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    base_dir = Path("/tmp/litminer_demo")
    text_dir = base_dir / "texts"
    output_dir = base_dir / "output"
    config = AnalysisConfig(cache_enabled=False, permutations=200, seed=42)

    timings = {}

    print_section("1. CREATING SAMPLE TEXTS")
    with Timer("creation") as t:
        novel, tweets = create_sample_texts(text_dir)
    timings["creation"] = t.elapsed
    print(f"  - {novel.name}\n  - {tweets.name}")

    print_section("2. LOADING AND SEGMENTATION")
    from litminer.loaders import load_corpus

    with Timer("load") as t:
        chapters = load_corpus(str(novel), split="chapters", config=config)
        tweet_corpus = load_corpus(str(tweets), split="lines", config=config)
    timings["load"] = t.elapsed
    print(f"Loaded {len(chapters)} chapters and {len(tweet_corpus)} tweets in {format_time(t.elapsed)}")
    for label in chapters.labels():
        print(f"  {label}")

    print_section("3. CLEANING TWEETS")
    from litminer.preprocessing.cleaner import Cleaner

    with Timer("clean") as t:
        batch = Cleaner(config).clean_batch(tweet_corpus.texts())
    timings["clean"] = t.elapsed
    for raw, cleaned in zip(tweet_corpus.texts(), batch.texts):
        print(f"  {raw!r}\n    -> {cleaned!r}")

    print_section("4. TOKENIZATION AND FREQUENCIES")
    from litminer.analyzers.tokenizer import WordTokenizer
    from litminer.analyzers.frequency import tabulate

    with Timer("tokenize") as t:
        tokenized = WordTokenizer(config).tokenize_corpus(chapters)
        matrix = tabulate(tokenized, config)
    timings["tokenize"] = t.elapsed

    corpus_table = matrix.corpus_table()
    print(f"Matrix shape: {matrix.shape} in {format_time(t.elapsed)}")
    print(f"count('whale') = {corpus_table.count('whale')}")
    group = ["whale", "whale's"]
    print(f"count({group}) = {corpus_table.count(group)}")
    print("\nTop 10 Tokens:")
    for token, count in corpus_table.top(10):
        print(f"  {token}: {count}")

    print("\nRelative frequency of 'whale' per chapter:")
    for label, value in zip(matrix.labels, matrix.relative_column("whale", per=config.per)):
        print(f"  {label:<30} {value:.2f}")

    print_section("5. CORRELATION")
    from litminer.analyzers.correlation import correlate

    with Timer("correlate") as t:
        result = correlate(matrix, "whale", "sea", config=config)
    timings["correlate"] = t.elapsed
    print(format_stats(result.to_dict()))

    print_section("6. FULL PIPELINE")
    from litminer.pipeline import Pipeline, document_payload

    pipeline = Pipeline(
        output_dir=output_dir,
        analyzers=["frequency", "lexical", "emotion"],
        config=config,
    )
    with Timer("pipeline") as t:
        analyzed = [d for d in pipeline.run([novel], split="chapters") if d is not None]
    timings["pipeline"] = t.elapsed

    for doc in analyzed:
        print(f"\n{doc.tokenized.title}:")
        print(f"  Emotion: {doc.emotion}")
        print(format_stats(doc.lexical, indent=4))

    print_section("7. VISUALIZATION")
    from litminer.visualizers.html_report import generate_html_report
    from litminer.visualizers.static_figures import generate_figures

    payloads = [document_payload(d) for d in analyzed]
    with Timer("visualize") as t:
        report_path = generate_html_report(payloads, output_dir, words=["whale", "sea"])
        figures = generate_figures(payloads, output_dir, dpi=100, words=["whale", "sea"])
    timings["visualize"] = t.elapsed
    print(f"HTML Report: {report_path}")
    print(f"Figures: {len(figures)} files in {format_time(t.elapsed)}")

    print_section("8. TIMING SUMMARY")
    grand_total = 0
    print(f"\n{'Stage':<25} {'Time':>12}")
    print("-" * 40)
    for stage, elapsed in timings.items():
        grand_total += elapsed
        print(f"{stage:<25} {format_time(elapsed):>12}")
    print("-" * 40)
    print(f"{'TOTAL':<25} {format_time(grand_total):>12}")

    print_section("DEMO COMPLETE")
    print(f"\nTo view the HTML report:")
    print(f"  file://{report_path}")

    return analyzed, timings


if __name__ == "__main__":
    run_demo()
