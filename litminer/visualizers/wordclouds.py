import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Mapping

from ..analyzers.frequency import FrequencyTable
from .static_figures import doc_table

logger = logging.getLogger(__name__)


def generate_wordcloud(
    frequencies: Mapping[str, int],
    output_path: Path,
    max_words: int = 200,
    width: int = 1200,
    height: int = 800,
    background_color: str = "white",
    colormap: str = "viridis",
) -> Path:
    """Render a frequency mapping as a PNG word cloud."""
    from wordcloud import WordCloud

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cloud = WordCloud(
        width=width,
        height=height,
        max_words=max_words,
        background_color=background_color,
        colormap=colormap,
        random_state=42,
    ).generate_from_frequencies(dict(frequencies))
    cloud.to_file(str(output_path))

    logger.info(f"Saved word cloud to {output_path}")
    return output_path


def label_frequencies(docs: List[Dict[str, Any]], key: str = "emotion") -> Dict[str, FrequencyTable]:
    """Pool document frequency tables by their classifier label."""
    pooled: Dict[str, FrequencyTable] = defaultdict(FrequencyTable)
    for doc in docs:
        label = doc.get(key)
        if label:
            pooled[label] = pooled[label].merge(doc_table(doc))
    return dict(pooled)


def generate_wordclouds(
    docs: List[Dict[str, Any]], output_dir: Path, key: str = "emotion", **kwargs
) -> List[Path]:
    """
    One word cloud for the whole corpus plus one per `key` label.

    Empty tables are skipped; WordCloud refuses to draw nothing.
    """
    output_dir = Path(output_dir)
    generated = []

    corpus = FrequencyTable()
    for doc in docs:
        corpus = corpus.merge(doc_table(doc))
    if corpus.total:
        generated.append(
            generate_wordcloud(corpus.to_dict(), output_dir / "wordcloud.png", **kwargs)
        )

    for label, table in label_frequencies(docs, key).items():
        if not table.total:
            continue
        safe = "".join(c if c.isalnum() else "_" for c in label)
        generated.append(
            generate_wordcloud(
                table.to_dict(), output_dir / f"wordcloud_{key}_{safe}.png", **kwargs
            )
        )

    return generated
