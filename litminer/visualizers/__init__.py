from .html_report import generate_html_report
from .static_figures import generate_figures
from .wordclouds import generate_wordcloud, generate_wordclouds

__all__ = [
    "generate_html_report",
    "generate_figures",
    "generate_wordcloud",
    "generate_wordclouds",
]
