from abc import ABC, abstractmethod

from .models import FeedResult


class BaseFeed(ABC):
    @abstractmethod
    def fetch(self, category: str = "general", page: int = 1) -> FeedResult:
        pass
