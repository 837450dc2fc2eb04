"""
Domain models shared by the cache tiers.
"""

from .article import Article, ArticleSource, NewsCategory

__all__ = ["Article", "ArticleSource", "NewsCategory"]
