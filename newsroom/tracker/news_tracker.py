import time
import logging
from typing import Dict, List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed

from newsroom.feeds.base import BaseFeed
from newsroom.feeds.models import FeedResult
from newsroom.tracker.worker import IngestionJob, IngestionWorker

logger = logging.getLogger(__name__)

_MAX_REFRESH_WORKERS = 4      # paralelismo entre categorias


class NewsTracker:
    """
    Orquestra busca + ingestão: devolve o feed na hora e entrega o batch
    para o worker de persistência sem esperar.
    """

    def __init__(self, feed: BaseFeed, worker: IngestionWorker):
        self.feed = feed
        self.worker = worker
        self.last_updated: Optional[int] = None

    def handle_fetch(self, category: str = "general", page: int = 1) -> FeedResult:
        result = self.feed.fetch(category, page)
        if result.articles:
            # fire-and-forget: latência da resposta = só o fetch
            self.worker.submit(IngestionJob(list(result.articles), category))
        self.last_updated = int(time.time())
        return result

    def refresh_all(self, categories: List[str]) -> Dict[str, int]:
        """Busca a página 1 de cada categoria em paralelo (job agendado)."""
        if not categories:
            return {}

        counts: Dict[str, int] = {}
        with ThreadPoolExecutor(max_workers=min(len(categories), _MAX_REFRESH_WORKERS)) as ex:
            futures = {ex.submit(self.handle_fetch, c, 1): c for c in categories}
            for fut in as_completed(futures):
                c = futures[fut]
                try:
                    counts[c] = len(fut.result().articles)
                except Exception:
                    logger.exception("[TRACKER] refresh failed for '%s'", c)
        logger.info("[TRACKER] Refreshed %s categories.", len(counts))
        return counts
