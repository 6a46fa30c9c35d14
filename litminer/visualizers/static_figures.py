import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..analyzers.dispersion import normalized_dispersion
from ..analyzers.frequency import DocumentFrequencyMatrix, FrequencyTable

logger = logging.getLogger(__name__)

BAR_COLOR = "#2E86AB"
ACCENT_COLOR = "#A23B72"


def doc_label(doc: Dict[str, Any], i: int) -> str:
    return doc.get("title") or f"{Path(doc.get('source_path', 'doc')).stem} #{i + 1}"


def doc_table(doc: Dict[str, Any]) -> FrequencyTable:
    if doc.get("frequencies"):
        return FrequencyTable(doc["frequencies"])
    return FrequencyTable.from_tokens(doc.get("filtered_tokens", []))


def docs_matrix(docs: List[Dict[str, Any]]) -> DocumentFrequencyMatrix:
    return DocumentFrequencyMatrix(
        [doc_table(d) for d in docs], [doc_label(d, i) for i, d in enumerate(docs)]
    )


def generate_figures(
    docs: List[Dict[str, Any]],
    output_dir: Path,
    dpi: int = 300,
    words: Optional[Sequence[str]] = None,
    top_n: int = 20,
    per: float = 100.0,
) -> List[Path]:
    """
    Generate static figures (PNG and PDF) with matplotlib.

    `words` picks the tokens for the per-chapter, scatter and dispersion
    figures; it defaults to the two most frequent tokens of the corpus.
    """
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        logger.error("matplotlib not installed. Install with: pip install matplotlib")
        return []

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    plt.style.use("seaborn-v0_8-whitegrid")

    matrix = docs_matrix(docs)
    if words is None:
        words = [token for token, _ in matrix.corpus_table().top(2)]
    words = list(words)

    figures = {
        "token_frequency": _create_token_frequency_figure(matrix, top_n),
        "relative_frequency": _create_relative_frequency_figure(matrix, words, per),
        "frequency_scatter": _create_scatter_figure(matrix, words, per),
        "dispersion": _create_dispersion_figure(docs, words),
        "lexical_variety": _create_lexical_figure(docs),
        "label_distribution": _create_label_figure(docs),
    }

    generated = []
    for name, fig in figures.items():
        if fig is None:
            continue
        for ext in ["png", "pdf"]:
            path = output_dir / f"{name}.{ext}"
            fig.savefig(path, dpi=dpi, bbox_inches="tight", facecolor="white")
            generated.append(path)
        plt.close(fig)

    logger.info(f"Generated {len(generated)} figure files")
    return generated


def _clean_axes(ax) -> None:
    for spine in ax.spines.values():
        spine.set_visible(False)
    ax.tick_params(axis="both", length=0)


def _create_token_frequency_figure(matrix: DocumentFrequencyMatrix, top_n: int) -> Any:
    """Horizontal bar chart of the top-N tokens."""
    import matplotlib.pyplot as plt

    top = matrix.corpus_table().top(top_n)
    if not top:
        return None

    fig, ax = plt.subplots(figsize=(10, 6))

    tokens = [t for t, _ in top]
    freqs = [c for _, c in top]

    ax.barh(range(len(tokens)), freqs, color=BAR_COLOR)
    ax.set_yticks(range(len(tokens)))
    ax.set_yticklabels(tokens)
    ax.invert_yaxis()
    ax.set_xlabel("Frequency")
    ax.set_title(f"Top {len(tokens)} Token Frequencies")
    _clean_axes(ax)

    plt.tight_layout()
    return fig


def _create_relative_frequency_figure(
    matrix: DocumentFrequencyMatrix, words: Sequence[str], per: float
) -> Any:
    """Grouped bars: relative frequency of each word per chapter, in chapter order."""
    import matplotlib.pyplot as plt
    import numpy as np

    if not words or len(matrix.tables) < 2:
        return None

    fig, ax = plt.subplots(figsize=(12, 5))

    x = np.arange(len(matrix.tables))
    width = 0.8 / len(words)
    colors = get_mpl_colors(len(words))
    for i, word in enumerate(words):
        values = np.array(matrix.relative_column(word, per=per), dtype=float)
        ax.bar(x + i * width, values, width, label=word, color=colors[i])

    ax.set_xlabel("Chapter")
    ax.set_ylabel(f"Occurrences per {per:g} words")
    ax.set_title("Relative Frequency by Chapter")
    ax.legend()
    if len(matrix.labels) <= 30:
        ax.set_xticks(x + width * (len(words) - 1) / 2)
        ax.set_xticklabels(matrix.labels, rotation=45, ha="right", fontsize=8)
    _clean_axes(ax)

    plt.tight_layout()
    return fig


def _create_scatter_figure(
    matrix: DocumentFrequencyMatrix, words: Sequence[str], per: float
) -> Any:
    """Scatter of two words' per-chapter relative frequencies, one labelled point per chapter."""
    import matplotlib.pyplot as plt
    import numpy as np

    if len(words) < 2 or len(matrix.tables) < 2:
        return None

    a, b = words[0], words[1]
    xs = np.array(matrix.relative_column(a, per=per), dtype=float)
    ys = np.array(matrix.relative_column(b, per=per), dtype=float)
    usable = ~(np.isnan(xs) | np.isnan(ys))
    if not usable.any():
        return None

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.scatter(xs[usable], ys[usable], color=BAR_COLOR, alpha=0.7)

    # alternate label offsets so neighbouring points do not stack their text
    offsets = [(6, 6), (-6, -10), (6, -10), (-6, 6)]
    for n, i in enumerate(np.flatnonzero(usable)):
        dx, dy = offsets[n % len(offsets)]
        ax.annotate(
            str(i + 1),
            (xs[i], ys[i]),
            xytext=(dx, dy),
            textcoords="offset points",
            ha="left" if dx > 0 else "right",
            fontsize=7,
            arrowprops=dict(arrowstyle="-", color="#999999", lw=0.5),
        )

    ax.set_xlabel(f"'{a}' per {per:g} words")
    ax.set_ylabel(f"'{b}' per {per:g} words")
    ax.set_title(f"'{a}' vs '{b}' by Chapter")
    _clean_axes(ax)

    plt.tight_layout()
    return fig


def _create_dispersion_figure(docs: List[Dict], words: Sequence[str]) -> Any:
    """Lexical dispersion ("x-ray") plot over the concatenated corpus."""
    import matplotlib.pyplot as plt

    tokens = [t for doc in docs for t in doc.get("tokens", [])]
    if not tokens or not words:
        return None

    positions = normalized_dispersion(tokens, words)
    if not any(positions.values()):
        return None

    fig, ax = plt.subplots(figsize=(12, 1 + 0.6 * len(words)))
    for row, word in enumerate(words):
        ax.plot(
            positions[word],
            [row] * len(positions[word]),
            "|",
            markersize=14,
            color=ACCENT_COLOR,
        )

    ax.set_yticks(range(len(words)))
    ax.set_yticklabels(words)
    ax.set_ylim(-0.5, len(words) - 0.5)
    ax.set_xlim(0, 1)
    ax.set_xlabel("Narrative time")
    ax.set_title("Lexical Dispersion Plot")
    _clean_axes(ax)

    plt.tight_layout()
    return fig


def _create_lexical_figure(docs: List[Dict]) -> Any:
    """Type-token ratio per document."""
    import matplotlib.pyplot as plt
    import math

    ratios = []
    names = []
    for i, doc in enumerate(docs):
        value = (doc.get("lexical") or {}).get("type_token_ratio")
        if value is None or math.isnan(value):
            continue
        ratios.append(value)
        names.append(doc_label(doc, i))

    if len(ratios) < 2:
        return None

    fig, ax = plt.subplots(figsize=(10, 5))

    ax.plot(range(len(ratios)), ratios, marker="o", color=BAR_COLOR, linewidth=2)
    ax.fill_between(range(len(ratios)), ratios, alpha=0.3, color=BAR_COLOR)

    ax.set_xlabel("Document")
    ax.set_ylabel("Type-token ratio")
    ax.set_title("Lexical Variety per Document")

    if len(names) <= 20:
        ax.set_xticks(range(len(names)))
        ax.set_xticklabels(names, rotation=45, ha="right", fontsize=8)
    _clean_axes(ax)

    plt.tight_layout()
    return fig


def _create_label_figure(docs: List[Dict]) -> Any:
    """Side-by-side bars of emotion and polarity label counts."""
    import matplotlib.pyplot as plt

    panels = []
    for key, title in [("emotion", "Emotion"), ("polarity", "Polarity")]:
        counts = Counter(d[key] for d in docs if d.get(key))
        if counts:
            panels.append((title, counts))

    if not panels:
        return None

    fig, axes = plt.subplots(1, len(panels), figsize=(6 * len(panels), 5), squeeze=False)
    for ax, (title, counts) in zip(axes[0], panels):
        ranked = counts.most_common()
        labels = [label for label, _ in ranked]
        ax.bar(labels, [n for _, n in ranked], color=get_mpl_colors(len(labels)))
        ax.set_title(f"{title} Classification")
        ax.set_ylabel("Documents")
        ax.tick_params(axis="x", rotation=30)
        _clean_axes(ax)

    plt.tight_layout()
    return fig


def get_mpl_colors(n: int) -> List[str]:
    """Get a colorblind-friendly color palette for matplotlib."""
    base_colors = [
        "#2E86AB",
        "#A23B72",
        "#F18F01",
        "#3B1F2B",
        "#95C623",
        "#1B998B",
        "#ED217C",
        "#7B68EE",
        "#FF6B6B",
        "#4ECDC4",
        "#45B7D1",
        "#96CEB4",
        "#FFEAA7",
        "#DDA0DD",
        "#C73E1D",
    ]
    return (base_colors * ((n // len(base_colors)) + 1))[:n]
