import os
import time
import logging
from contextlib import asynccontextmanager
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

# Carrega variáveis do .env antes de ler a configuração
load_dotenv(override=True)

from newsroom.classifier.news_classifier import NewsClassifier, Sentiment  # noqa: E402
from newsroom.feeds import NewsApiFeed  # noqa: E402
from newsroom.storage.database import SessionLocal, get_db, init_db  # noqa: E402
from newsroom.storage.ingest import ArticleIngestor  # noqa: E402
from newsroom.storage.repository import get_article, list_articles, list_categories  # noqa: E402
from newsroom.storage.schemas import ArticleOut  # noqa: E402
from newsroom.summarizer.news_summarizer import NewsSummarizer  # noqa: E402
from newsroom.tracker.news_tracker import NewsTracker  # noqa: E402
from newsroom.tracker.worker import IngestionWorker  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

REFRESH_INTERVAL_MINUTES = int(os.getenv("REFRESH_INTERVAL_MINUTES", "0"))  # 0 = desligado
REFRESH_CATEGORIES = [c.strip() for c in os.getenv("REFRESH_CATEGORIES", "general").split(",") if c.strip()]
INGEST_QUEUE_SIZE = int(os.getenv("INGEST_QUEUE_SIZE", "0"))


classifier = NewsClassifier()
summarizer = NewsSummarizer()
ingestor = ArticleIngestor(SessionLocal, classifier, summarizer)
worker = IngestionWorker(ingestor, maxsize=INGEST_QUEUE_SIZE)
tracker = NewsTracker(NewsApiFeed.from_env(), worker)

# Scheduler com configurações para evitar empilhamento de jobs
scheduler = BackgroundScheduler(
    job_defaults={
        "coalesce": True,         # junta execuções atrasadas
        "max_instances": 1,       # não roda dois iguais ao mesmo tempo
        "misfire_grace_time": 30, # 30s de tolerância
    }
)


def refresh_categories():
    return tracker.refresh_all(REFRESH_CATEGORIES)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("[API] Database tables checked/created.")
    worker.start()
    if REFRESH_INTERVAL_MINUTES > 0:
        scheduler.add_job(refresh_categories, "interval", minutes=REFRESH_INTERVAL_MINUTES, id="refresh_news")
    scheduler.start()

    yield
    scheduler.shutdown(wait=False)
    worker.stop()


class ContentRequest(BaseModel):
    content: Optional[str] = None
    sentence_count: int = Field(default=3, ge=1)


def _require_content(body: ContentRequest) -> str:
    if not body.content or not body.content.strip():
        raise HTTPException(400, "Article content is required")
    return body.content


#%% APP

app = FastAPI(lifespan=lifespan)

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # ajuste se precisar restringir
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=512)


@app.get("/health")
def health():
    return {"status": "ok", "ts": int(time.time())}


@app.get("/last-update")
def last_update():
    return {"status": "success", "last_update": tracker.last_updated}


@app.get("/news")
def get_news(category: str = "general", page: int = Query(1, ge=1)):
    """Feed cru (ou fallback). A persistência roda em background e nunca afeta a resposta."""
    return tracker.handle_fetch(category or "general", page).model_dump()


@app.post("/ai/sentiment")
def ai_sentiment(body: ContentRequest):
    content = _require_content(body)
    return {"sentiment": classifier.classify(content).value}


@app.post("/ai/summarize")
def ai_summarize(body: ContentRequest):
    content = _require_content(body)
    return {"summary": summarizer.summarize(content, body.sentence_count)}


@app.get("/articles")
def api_list_articles(
    category: Optional[str] = None,
    sentiment: Optional[Sentiment] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    rows = list_articles(
        db,
        category=category,
        sentiment=sentiment.value if sentiment else None,
        limit=limit,
        offset=offset,
    )
    return {"status": "success", "data": [ArticleOut.from_orm_row(r).model_dump(mode="json") for r in rows]}


@app.get("/articles/{article_id}")
def api_get_article(article_id: int, db: Session = Depends(get_db)):
    row = get_article(db, article_id)
    if row is None:
        raise HTTPException(404, "Article not found")
    return {"status": "success", "data": ArticleOut.from_orm_row(row).model_dump(mode="json")}


@app.get("/categories")
def api_list_categories(db: Session = Depends(get_db)):
    return {"status": "success", "data": list_categories(db)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("newsroom.api.main:app", host="0.0.0.0", port=8000, reload=True)
