from __future__ import annotations
import html
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .static_figures import docs_matrix, doc_label, get_mpl_colors

logger = logging.getLogger(__name__)

try:
    import plotly.graph_objects as go

    PLOTLY_AVAILABLE = True
except ImportError:
    PLOTLY_AVAILABLE = False
    go = None


def generate_html_report(
    docs: List[Dict[str, Any]],
    output_dir: Path,
    words: Optional[Sequence[str]] = None,
    top_n: int = 30,
) -> Path:
    """Generate an interactive HTML report using Plotly."""
    if not PLOTLY_AVAILABLE:
        logger.error("plotly not installed. Install with: pip install plotly")
        return _generate_fallback_html(docs, output_dir)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    report_path = output_dir / "report.html"

    if words is None:
        words = [t for t, _ in docs_matrix(docs).corpus_table().top(2)]

    charts = [
        _create_token_frequency_chart(docs, top_n),
        _create_relative_frequency_chart(docs, words),
        _create_term_heatmap(docs, top_n=15),
        _create_label_chart(docs, "emotion", "Emotion Distribution"),
        _create_label_chart(docs, "polarity", "Polarity Distribution"),
        _create_lexical_chart(docs),
    ]
    figures_html = [
        chart.to_html(full_html=False, include_plotlyjs=False)
        for chart in charts
        if chart is not None
    ]

    report_path.write_text(_wrap_html(figures_html, docs), encoding="utf-8")
    logger.info(f"Generated HTML report: {report_path}")

    return report_path


def _create_token_frequency_chart(docs: List[Dict], top_n: int) -> Optional[Any]:
    """Create a bar chart of top token frequencies."""
    top = docs_matrix(docs).corpus_table().top(top_n)
    if not top:
        return None

    fig = go.Figure(
        [go.Bar(x=[t for t, _ in top], y=[c for _, c in top], marker_color="#2E86AB")]
    )
    fig.update_layout(
        title=f"Top {len(top)} Token Frequencies",
        xaxis_title="Token",
        yaxis_title="Frequency",
        xaxis_tickangle=-45,
        height=400,
        margin=dict(b=100),
    )
    return fig


def _create_relative_frequency_chart(docs: List[Dict], words: Sequence[str]) -> Optional[Any]:
    """Line chart of each word's relative frequency across chapters."""
    matrix = docs_matrix(docs)
    if len(matrix.tables) < 2 or not words:
        return None

    x = list(range(1, len(matrix.tables) + 1))
    fig = go.Figure(
        [
            go.Scatter(
                x=x,
                y=matrix.relative_column(word),
                mode="lines+markers",
                name=word,
                text=matrix.labels,
            )
            for word in words
        ]
    )
    fig.update_layout(
        title="Relative Frequency by Chapter (per 100 words)",
        xaxis_title="Chapter",
        yaxis_title="Occurrences per 100 words",
        height=400,
    )
    return fig


def _create_term_heatmap(docs: List[Dict], top_n: int) -> Optional[Any]:
    """Heatmap of the corpus's top terms (columns) across documents (rows)."""
    matrix = docs_matrix(docs)
    if len(matrix.tables) < 2:
        return None

    terms = [t for t, _ in matrix.corpus_table().top(top_n)]
    if not terms:
        return None

    dense = matrix.relative_dense()
    columns = [matrix.index_of(t) for t in terms]

    fig = go.Figure(
        [
            go.Heatmap(
                z=dense[:, columns].tolist(),
                x=terms,
                y=matrix.labels,
                colorscale="Blues",
            )
        ]
    )
    fig.update_layout(
        title="Top Terms per Document (per 100 words)",
        xaxis_title="Term",
        yaxis_title="Document",
        height=max(300, len(matrix.labels) * 30),
    )
    return fig


def _create_label_chart(docs: List[Dict], key: str, title: str) -> Optional[Any]:
    """Donut chart of classifier labels."""
    counts = Counter(d[key] for d in docs if d.get(key))
    if not counts:
        return None

    fig = go.Figure(
        [
            go.Pie(
                labels=list(counts.keys()),
                values=list(counts.values()),
                hole=0.4,
                marker_colors=get_mpl_colors(len(counts)),
            )
        ]
    )
    fig.update_layout(title=title, height=400)
    return fig


def _create_lexical_chart(docs: List[Dict]) -> Optional[Any]:
    """Line chart of type-token ratio per document."""
    points = [
        (doc_label(d, i), d["lexical"]["type_token_ratio"])
        for i, d in enumerate(docs)
        if (d.get("lexical") or {}).get("type_token_ratio") is not None
    ]
    if len(points) < 2:
        return None

    fig = go.Figure(
        [
            go.Scatter(
                x=[p[0] for p in points],
                y=[p[1] for p in points],
                mode="lines+markers",
                marker_color="#A23B72",
            )
        ]
    )
    fig.update_layout(
        title="Lexical Variety (type-token ratio)",
        xaxis_title="Document",
        yaxis_title="Type-token ratio",
        height=350,
    )
    return fig


def _wrap_html(figures_html: List[str], docs: List[Dict]) -> str:
    """Wrap figure HTML in a complete HTML document."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    figures_section = "\n".join(
        f'<div class="figure-container">{fig}</div>' for fig in figures_html
    )

    stats = _compute_summary_stats(docs)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>litminer Analysis Report</title>
    <script src="https://cdn.plot.ly/plotly-2.27.0.min.js"></script>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            max-width: 1200px;
            margin: 0 auto;
            padding: 20px;
            background: #f5f5f5;
        }}
        h1 {{
            color: #2E86AB;
            border-bottom: 2px solid #2E86AB;
            padding-bottom: 10px;
        }}
        .summary {{
            background: white;
            padding: 20px;
            border-radius: 8px;
            margin-bottom: 20px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }}
        .summary-grid {{
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
            gap: 15px;
        }}
        .stat-card {{
            background: #f8f9fa;
            padding: 15px;
            border-radius: 6px;
            text-align: center;
        }}
        .stat-value {{
            font-size: 2em;
            font-weight: bold;
            color: #2E86AB;
        }}
        .stat-label {{
            color: #666;
            font-size: 0.9em;
        }}
        .figure-container {{
            background: white;
            padding: 20px;
            border-radius: 8px;
            margin-bottom: 20px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }}
        .timestamp {{
            color: #666;
            font-size: 0.9em;
        }}
    </style>
</head>
<body>
    <h1>litminer Analysis Report</h1>
    <p class="timestamp">Generated: {timestamp}</p>

    <div class="summary">
        <h2>Summary Statistics</h2>
        <div class="summary-grid">
            <div class="stat-card">
                <div class="stat-value">{stats["total_docs"]}</div>
                <div class="stat-label">Documents</div>
            </div>
            <div class="stat-card">
                <div class="stat-value">{stats["total_tokens"]:,}</div>
                <div class="stat-label">Total Tokens</div>
            </div>
            <div class="stat-card">
                <div class="stat-value">{stats["unique_tokens"]:,}</div>
                <div class="stat-label">Unique Tokens</div>
            </div>
            <div class="stat-card">
                <div class="stat-value">{stats["labeled_docs"]:,}</div>
                <div class="stat-label">Emotion Labelled</div>
            </div>
        </div>
    </div>

    {figures_section}
</body>
</html>"""


def _compute_summary_stats(docs: List[Dict]) -> Dict[str, int]:
    """Compute summary statistics for the report."""
    all_tokens = []
    labeled = 0

    for doc in docs:
        all_tokens.extend(doc.get("tokens", []))
        if doc.get("emotion") and doc["emotion"] != "unknown":
            labeled += 1

    return {
        "total_docs": len(docs),
        "total_tokens": len(all_tokens),
        "unique_tokens": len(set(all_tokens)),
        "labeled_docs": labeled,
    }


def _generate_fallback_html(docs: List[Dict], output_dir: Path) -> Path:
    """Generate a simple HTML report without Plotly."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    report_path = output_dir / "report.html"

    stats = _compute_summary_stats(docs)
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    doc_rows = []
    for i, doc in enumerate(docs):
        doc_rows.append(
            "<tr><td>{}</td><td>{}</td><td>{}</td><td>{}</td></tr>".format(
                html.escape(doc_label(doc, i)),
                html.escape(str(doc.get("emotion") or "")),
                html.escape(str(doc.get("polarity") or "")),
                len(doc.get("tokens", [])),
            )
        )

    page = f"""<!DOCTYPE html>
<html>
<head>
    <title>litminer Report</title>
    <style>
        body {{ font-family: sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; }}
        table {{ border-collapse: collapse; width: 100%; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background: #2E86AB; color: white; }}
    </style>
</head>
<body>
    <h1>litminer Report</h1>
    <p>Generated: {timestamp}</p>
    <p>Documents: {stats["total_docs"]} | Tokens: {stats["total_tokens"]} | Unique: {stats["unique_tokens"]}</p>
    <h2>Documents</h2>
    <table>
        <tr><th>Document</th><th>Emotion</th><th>Polarity</th><th>Tokens</th></tr>
        {"".join(doc_rows)}
    </table>
</body>
</html>"""

    report_path.write_text(page, encoding="utf-8")
    return report_path
