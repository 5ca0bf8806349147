from .newsapi import NewsApiFeed
from .models import FeedResult, FeedSource, RawArticle
from .sample import sample_feed
from .base import BaseFeed

__all__ = ["NewsApiFeed", "BaseFeed", "FeedResult", "FeedSource", "RawArticle", "sample_feed"]
