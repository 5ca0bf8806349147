"""
Persistência dos artigos buscados: normaliza Source/Category, deduplica por URL
canônica e grava os artigos novos já com sentimento e resumo.

Política de falha: cada artigo é commitado sozinho. Se algo estourar no meio do
batch, o erro é logado, `ingest` retorna False e o que já foi gravado fica.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from sqlalchemy.orm import Session, sessionmaker

from newsroom.classifier.news_classifier import NewsClassifier, Sentiment
from newsroom.feeds.models import RawArticle
from newsroom.storage.database import SessionLocal
from newsroom.storage.models import CategoryORM
from newsroom.storage.repository import (
    create_article,
    find_or_create_category,
    find_or_create_source,
    get_article_by_url,
    link_article_category,
)
from newsroom.summarizer.news_summarizer import NewsSummarizer
from newsroom.utils.tz_utils import parse_published

logger = logging.getLogger(__name__)


@dataclass
class IngestStats:
    total: int = 0
    created: int = 0
    skipped: int = 0


class ArticleIngestor:
    def __init__(
        self,
        session_factory: sessionmaker = SessionLocal,
        classifier: Optional[NewsClassifier] = None,
        summarizer: Optional[NewsSummarizer] = None,
    ):
        self.session_factory = session_factory
        self.classifier = classifier or NewsClassifier()
        self.summarizer = summarizer or NewsSummarizer()

    def enrich(self, text: str) -> Tuple[Sentiment, Optional[str]]:
        """Sentimento e resumo em paralelo; junta os dois antes de gravar."""
        with ThreadPoolExecutor(max_workers=2) as ex:
            sentiment_fut = ex.submit(self.classifier.classify, text)
            summary_fut = ex.submit(self.summarizer.summarize, text)
            sentiment = sentiment_fut.result()
            summary = summary_fut.result()
        return sentiment, summary or None

    def _ingest_one(self, db: Session, raw: RawArticle, category: CategoryORM, stats: IngestStats) -> None:
        source = find_or_create_source(db, raw.source.name, category=category.name)

        # fronteira de dedup: URL já vista -> não atualiza, não cria link
        if get_article_by_url(db, raw.url) is not None:
            db.commit()
            stats.skipped += 1
            return

        sentiment, summary = self.enrich(raw.richest_text())
        article = create_article(
            db,
            title=raw.title,
            description=raw.description or None,
            content=raw.content or None,
            url=raw.url,
            url_to_image=raw.urlToImage or None,
            published_at=parse_published(raw.publishedAt) or datetime.now(timezone.utc),
            source_id=source.id,
            sentiment=sentiment.value,
            summary=summary,
        )
        if article is None:
            # outro batch gravou a mesma URL entre o SELECT e o INSERT
            db.commit()
            stats.skipped += 1
            return

        link_article_category(db, article.id, category.id)
        db.commit()
        stats.created += 1

    def ingest(self, articles: Iterable[RawArticle], category_name: str) -> bool:
        stats = IngestStats()
        try:
            with self.session_factory() as db:
                category = find_or_create_category(db, category_name)
                db.commit()
                # sequencial de propósito: evita Source/Category duplicados dentro do batch
                for raw in articles:
                    stats.total += 1
                    self._ingest_one(db, raw, category, stats)
        except Exception:
            logger.exception(
                "[INGEST] Error saving batch for category '%s' after %s article(s)",
                category_name, stats.total,
            )
            return False

        logger.info(
            "[INGEST] Category '%s': %s new, %s already stored (of %s).",
            category_name, stats.created, stats.skipped, stats.total,
        )
        return True
