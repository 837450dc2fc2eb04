"""
Article payload models cached by the news cache tiers.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, TypeAdapter


class NewsCategory(str, Enum):
    """News categories offered by the feed."""
    WORLD = "world"
    BUSINESS = "business"
    TECHNOLOGY = "technology"
    SCIENCE = "science"
    HEALTH = "health"
    SPORTS = "sports"
    ENTERTAINMENT = "entertainment"


class ArticleSource(BaseModel):
    """Publisher of an article."""
    id: Optional[str] = Field(None, description="Machine identifier of the source")
    name: str = Field(..., description="Human readable source name")


class Article(BaseModel):
    """A single news article."""
    id: str = Field(..., description="Stable article identifier")
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    source: ArticleSource
    url: str
    image_url: Optional[str] = None
    published_at: datetime
    category: Optional[NewsCategory] = None


ArticleList = List[Article]

article_list_adapter: TypeAdapter[List[Article]] = TypeAdapter(List[Article])
