import os
import logging
import requests
from typing import Any, Dict, List, Optional
from pydantic import ValidationError

from .base import BaseFeed
from .models import FeedResult, RawArticle
from .sample import sample_feed

logger = logging.getLogger(__name__)

# ---------- HTTP session global (pool de conexões; sem retry: falhou -> fallback) ----------
_SESSION = requests.Session()
_SESSION.headers.update({"User-Agent": "Newsroom/1.0 (+https://localhost)"})


class NewsApiFeed(BaseFeed):
    BASE_URL = "https://newsapi.org/v2/top-headlines"
    TIMEOUT = 10
    PAGE_SIZE = 10
    COUNTRY = "us"

    def __init__(
        self,
        api_key: Optional[str] = None,
        country: str = COUNTRY,
        page_size: int = PAGE_SIZE,
        base_url: str = BASE_URL,
        timeout: float = TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key: Optional[str] = api_key or None
        self.country: str = country
        self.page_size: int = page_size
        self.base_url: str = base_url
        self.timeout: float = timeout
        self.session = session or _SESSION

    @classmethod
    def from_env(cls, session: Optional[requests.Session] = None) -> "NewsApiFeed":
        """Cria o feed lendo NEWS_API_KEY e afins do ambiente."""
        return cls(
            api_key=os.getenv("NEWS_API_KEY"),
            country=os.getenv("NEWS_COUNTRY", cls.COUNTRY),
            page_size=int(os.getenv("NEWS_PAGE_SIZE", str(cls.PAGE_SIZE))),
            base_url=os.getenv("NEWS_API_URL", cls.BASE_URL),
            timeout=float(os.getenv("NEWS_API_TIMEOUT", str(cls.TIMEOUT))),
            session=session,
        )

    @staticmethod
    def _parse_articles(items: List[Dict[str, Any]]) -> List[RawArticle]:
        articles: List[RawArticle] = []
        for item in items:
            try:
                art = RawArticle.model_validate(item)
            except ValidationError as e:
                logger.warning("[FEED] Dropping malformed upstream article: %s", e.errors()[:1])
                continue
            # sem URL/título não dá para deduplicar
            if not art.url.strip() or not art.title.strip():
                continue
            articles.append(art)
        return articles

    def fetch(self, category: str = "general", page: int = 1) -> FeedResult:
        if not self.api_key:
            logger.warning("[FEED] NEWS_API_KEY is not set. Using sample data instead.")
            return sample_feed()

        params = {
            "apiKey": self.api_key,
            "country": self.country,
            "category": category,
            "page": page,
            "pageSize": self.page_size,
        }
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("[FEED] Fetch failed for '%s' (page %s): %s. Using sample data.", category, page, e)
            return sample_feed()

        if not isinstance(payload, dict) or payload.get("status") != "ok":
            logger.error(
                "[FEED] Upstream returned non-ok payload for '%s': %s. Using sample data.",
                category, payload.get("message") if isinstance(payload, dict) else payload,
            )
            return sample_feed()

        articles = self._parse_articles(payload.get("articles") or [])
        try:
            return FeedResult(
                status="ok",
                totalResults=payload.get("totalResults") or len(articles),
                articles=articles,
            )
        except ValidationError as e:
            logger.error("[FEED] Invalid upstream envelope for '%s': %s. Using sample data.", category, e)
            return sample_feed()
