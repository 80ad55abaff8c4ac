"""
ArticleScope - Rule-driven article extraction from HTML documents.

Resolves per-source selector rules field by field, falls back to
generic heuristics when no rule matches, and assembles a clean
structured article record.
"""

__version__ = "0.1.0"
__app_name__ = "articlescope"

from articlescope.api import parse  # noqa: E402

__all__ = ["parse", "__version__", "__app_name__"]
