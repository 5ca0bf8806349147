# newsroom/tests/conftest.py
import pytest

from newsroom.feeds.models import RawArticle
from newsroom.storage.database import init_db, make_engine, make_session_factory


@pytest.fixture()
def session_factory(tmp_path):
    # Banco SQLite temporário por teste
    engine = make_engine(f"sqlite:///{tmp_path / 'newsroom_test.sqlite3'}")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def make_article():
    def _make(url, title="Title", content=None, description=None, source="Unit Source", published="2024-05-01T10:00:00Z"):
        return RawArticle(
            source={"id": None, "name": source},
            title=title,
            description=description,
            url=url,
            urlToImage=None,
            publishedAt=published,
            content=content,
        )
    return _make


@pytest.fixture()
def ingestor(session_factory):
    from newsroom.storage.ingest import ArticleIngestor
    return ArticleIngestor(session_factory)


@pytest.fixture()
def app(monkeypatch, session_factory):
    # Patches para impedir network/scheduler/thread no startup
    monkeypatch.delenv("NEWS_API_KEY", raising=False)
    from newsroom.api import main as api_main
    from newsroom.feeds import NewsApiFeed
    from newsroom.tracker.worker import InlineIngestionWorker

    # 1) tabelas já criadas no banco temporário
    monkeypatch.setattr(api_main, "init_db", lambda *a, **k: None, raising=True)

    # 2) scheduler.start/shutdown: no-op
    class DummyScheduler:
        def add_job(self, *a, **k): pass
        def start(self): pass
        def shutdown(self, wait=False): pass
    monkeypatch.setattr(api_main, "scheduler", DummyScheduler(), raising=True)

    # 3) persistência síncrona no banco temporário
    monkeypatch.setattr(api_main.ingestor, "session_factory", session_factory, raising=True)
    inline = InlineIngestionWorker(api_main.ingestor)
    monkeypatch.setattr(api_main, "worker", inline, raising=True)
    monkeypatch.setattr(api_main.tracker, "worker", inline, raising=True)

    # 4) feed sempre em modo fallback (sem chave)
    monkeypatch.setattr(api_main.tracker, "feed", NewsApiFeed(api_key=None), raising=True)

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()
    api_main.app.dependency_overrides[api_main.get_db] = _get_db
    yield api_main.app
    api_main.app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient
    # Usa contexto para garantir lifespan mas com patches aplicados
    with TestClient(app) as c:
        yield c
