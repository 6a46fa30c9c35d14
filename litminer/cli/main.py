import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from ..config import AnalysisConfig, load_config
from ..exceptions import ConfigError
from ..utils.logger import setup_logger

logger = logging.getLogger(__name__)

_SPLITS = ["whole", "chapters", "lines"]


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="litminer",
        description="litminer - word frequency, correlation and sentiment for literary text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="YAML config file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    _add_analyze_subparser(subparsers)
    _add_top_subparser(subparsers)
    _add_correlate_subparser(subparsers)
    _add_visualize_subparser(subparsers)
    _add_run_subparser(subparsers)

    return parser


def _add_source_arguments(parser):
    parser.add_argument(
        "-i",
        "--input",
        nargs="+",
        required=True,
        help="Input text file(s), directory or http(s) URL(s)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("output"),
        help="Output directory (default: output)",
    )
    parser.add_argument(
        "--split",
        choices=_SPLITS,
        default="whole",
        help="Split each source into documents (default: whole)",
    )
    parser.add_argument(
        "--analyzers",
        type=str,
        default="all",
        help="Comma-separated analyzers: frequency,lexical,polarity,emotion (default: all)",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Strip retweets, mentions, URLs, digits and punctuation before tokenizing",
    )


def _add_analyze_subparser(subparsers):
    """Add the analyze subcommand."""
    analyze_parser = subparsers.add_parser(
        "analyze", help="Tokenize, count and classify text"
    )
    _add_source_arguments(analyze_parser)


def _add_top_subparser(subparsers):
    """Add the top subcommand."""
    top_parser = subparsers.add_parser(
        "top", help="Print the most frequent tokens of analyzed documents"
    )
    top_parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="Input JSON file or directory from analyze",
    )
    top_parser.add_argument(
        "-n", type=int, default=None, help="Number of tokens (default: config top_n)"
    )
    top_parser.add_argument(
        "--per-document",
        action="store_true",
        help="Print a ranking for every document instead of the corpus",
    )


def _add_correlate_subparser(subparsers):
    """Add the correlate subcommand."""
    correlate_parser = subparsers.add_parser(
        "correlate",
        help="Correlate two words' relative frequencies across documents",
    )
    correlate_parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="Input JSON file or directory from analyze",
    )
    correlate_parser.add_argument(
        "word_a", help="First word; join variants with commas (whale,whale's)"
    )
    correlate_parser.add_argument("word_b", help="Second word")
    correlate_parser.add_argument(
        "--method",
        choices=["pearson", "spearman"],
        default="pearson",
        help="Correlation coefficient (default: pearson)",
    )
    correlate_parser.add_argument(
        "--permutations",
        type=int,
        default=None,
        help="Permutation test rounds (default: config permutations)",
    )
    correlate_parser.add_argument(
        "--seed", type=int, default=None, help="Seed for the permutation test"
    )


def _add_figure_arguments(parser):
    parser.add_argument(
        "--html",
        action="store_true",
        default=True,
        help="Generate HTML report (default: True)",
    )
    parser.add_argument(
        "--no-html", dest="html", action="store_false", help="Skip the HTML report"
    )
    parser.add_argument(
        "--figures", action="store_true", help="Generate static figures (PNG/PDF)"
    )
    parser.add_argument(
        "--wordcloud", action="store_true", help="Generate word clouds per emotion"
    )
    parser.add_argument(
        "--dpi", type=int, default=300, help="DPI for static figures (default: 300)"
    )
    parser.add_argument(
        "--words",
        type=str,
        default=None,
        help="Comma-separated words to chart (default: two most frequent)",
    )


def _add_visualize_subparser(subparsers):
    """Add the visualize subcommand."""
    visualize_parser = subparsers.add_parser(
        "visualize", help="Generate visualizations from analysis results"
    )
    visualize_parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="Input JSON file or directory from analyze",
    )
    visualize_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("output"),
        help="Output directory (default: output)",
    )
    _add_figure_arguments(visualize_parser)


def _add_run_subparser(subparsers):
    """Add the run subcommand (full pipeline)."""
    run_parser = subparsers.add_parser(
        "run", help="Run full pipeline: analyze -> visualize"
    )
    _add_source_arguments(run_parser)
    _add_figure_arguments(run_parser)


def cmd_analyze(args, config: AnalysisConfig) -> int:
    """Execute the analyze command."""
    from ..pipeline import Pipeline

    sources = _collect_sources(args.input)
    if not sources:
        print(f"No text files found in {' '.join(args.input)}")
        return 1

    print(f"Analyzing {len(sources)} source(s)...")

    try:
        pipeline = Pipeline(
            output_dir=args.output,
            analyzers=_parse_analyzers(args.analyzers),
            config=config,
            clean=args.clean,
        )
    except ValueError as e:
        print(e)
        return 1
    results = pipeline.run(sources, split=args.split)

    analyzed = [r for r in results if r is not None]
    failed = len(results) - len(analyzed)
    print(f"Analyzed {len(analyzed)} document(s)")
    if failed:
        print(f"{failed} source(s) could not be loaded")
    return 0 if analyzed else 1


def cmd_top(args, config: AnalysisConfig) -> int:
    """Execute the top command."""
    from ..pipeline import load_payloads
    from ..visualizers.static_figures import doc_label, doc_table, docs_matrix

    docs = load_payloads(_collect_json_files(args.input))
    if not docs:
        print(f"No JSON files found in {args.input}")
        return 1

    n = args.n if args.n is not None else config.top_n

    if args.per_document:
        for i, doc in enumerate(docs):
            print(f"== {doc_label(doc, i)}")
            _print_ranking(doc_table(doc).top(n))
        return 0

    _print_ranking(docs_matrix(docs).corpus_table().top(n))
    return 0


def _print_ranking(ranking) -> None:
    for rank, (token, count) in enumerate(ranking, start=1):
        print(f"{rank:>4}  {token:<20} {count}")


def cmd_correlate(args, config: AnalysisConfig) -> int:
    """Execute the correlate command."""
    from ..analyzers.correlation import correlate
    from ..pipeline import load_payloads
    from ..visualizers.static_figures import docs_matrix

    docs = load_payloads(_collect_json_files(args.input))
    if not docs:
        print(f"No JSON files found in {args.input}")
        return 1

    if args.permutations is not None:
        config.permutations = args.permutations
    if args.seed is not None:
        config.seed = args.seed

    a = _parse_words(args.word_a)
    b = _parse_words(args.word_b)
    result = correlate(docs_matrix(docs), a, b, method=args.method, config=config)

    if math.isnan(result.r):
        print(f"Correlation undefined ({result.n} usable documents)")
        return 1

    print(f"{result.method} r = {result.r:.4f}  p = {result.p_value:.4g}  n = {result.n}")
    if result.permutation_p is not None:
        print(
            f"permutation p = {result.permutation_p:.4g} ({result.permutations} rounds)"
        )
    return 0


def cmd_visualize(args, config: AnalysisConfig) -> int:
    """Execute the visualize command."""
    from ..pipeline import load_payloads

    output_dir = args.output
    output_dir.mkdir(parents=True, exist_ok=True)

    docs = load_payloads(_collect_json_files(args.input))
    if not docs:
        print(f"No JSON files found in {args.input}")
        return 1

    _render(docs, output_dir, args, config)
    return 0


def cmd_run(args, config: AnalysisConfig) -> int:
    """Execute the full pipeline."""
    from ..pipeline import Pipeline, document_payload

    sources = _collect_sources(args.input)
    if not sources:
        print(f"No text files found in {' '.join(args.input)}")
        return 1

    print(f"Processing {len(sources)} source(s)...")

    try:
        pipeline = Pipeline(
            output_dir=args.output,
            analyzers=_parse_analyzers(args.analyzers),
            config=config,
            clean=args.clean,
        )
    except ValueError as e:
        print(e)
        return 1
    results = pipeline.run(sources, split=args.split)

    analyzed = [r for r in results if r is not None]
    print(f"Processed {len(analyzed)} document(s)")
    if not analyzed:
        return 1

    _render([document_payload(d) for d in analyzed], args.output, args, config)
    return 0


def _render(docs, output_dir: Path, args, config: AnalysisConfig) -> None:
    words = _parse_words(args.words) if args.words else None

    if args.html:
        from ..visualizers.html_report import generate_html_report

        report_path = generate_html_report(docs, output_dir, words=words)
        print(f"HTML report: {report_path}")

    if args.figures:
        from ..visualizers.static_figures import generate_figures

        figure_paths = generate_figures(
            docs,
            output_dir,
            dpi=args.dpi,
            words=words,
            top_n=config.top_n,
            per=config.per,
        )
        print(f"Generated {len(figure_paths)} figures")

    if args.wordcloud:
        from ..visualizers.wordclouds import generate_wordclouds

        cloud_paths = generate_wordclouds(docs, output_dir)
        print(f"Generated {len(cloud_paths)} word clouds")


def _parse_analyzers(value: str) -> Optional[List[str]]:
    if value == "all":
        return None
    return [a.strip() for a in value.split(",") if a.strip()]


def _parse_words(value: str):
    words = [w.strip() for w in value.split(",") if w.strip()]
    return words[0] if len(words) == 1 else words


def _collect_sources(inputs: List[str]) -> List[str]:
    """Expand directories to their .txt files; URLs and files pass through."""
    sources = []
    for item in inputs:
        if item.startswith(("http://", "https://")):
            sources.append(item)
            continue
        path = Path(item)
        if path.is_dir():
            sources.extend(str(p) for p in sorted(path.glob("*.txt")))
        else:
            sources.append(item)
    return sources


def _collect_json_files(path: Path) -> List[Path]:
    """Collect JSON files from a path."""
    if path.is_file():
        return [path] if path.suffix.lower() == ".json" else []
    return sorted(path.glob("*.json"))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Config error: {e}")
        return 1

    commands = {
        "analyze": cmd_analyze,
        "top": cmd_top,
        "correlate": cmd_correlate,
        "visualize": cmd_visualize,
        "run": cmd_run,
    }

    return commands[args.command](args, config)


if __name__ == "__main__":
    sys.exit(main())
