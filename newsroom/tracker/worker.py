import queue
import logging
from dataclasses import dataclass, field
from threading import Lock, Thread
from typing import List, Optional

from newsroom.feeds.models import RawArticle
from newsroom.storage.ingest import ArticleIngestor

logger = logging.getLogger(__name__)

_STOP = None  # sentinela para encerrar a thread


@dataclass
class IngestionJob:
    articles: List[RawArticle]
    category: str
    ok: Optional[bool] = field(default=None, compare=False)


class IngestionWorker:
    """
    Fila FIFO + thread daemon que drena os jobs de persistência.
    O caminho da requisição só enfileira; o resultado de cada job é logado.
    """

    def __init__(self, ingestor: ArticleIngestor, maxsize: int = 0):
        self.ingestor = ingestor
        self._queue: "queue.Queue[Optional[IngestionJob]]" = queue.Queue(maxsize=maxsize)
        self._thread: Optional[Thread] = None
        self._lock = Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                return
            self._thread = Thread(target=self._run, name="ingestion-worker", daemon=True)
            self._thread.start()

    def submit(self, job: IngestionJob) -> bool:
        if not self.is_running:
            self.start()
        try:
            self._queue.put_nowait(job)
        except queue.Full:
            logger.warning(
                "[WORKER] Queue full, dropping batch of %s article(s) for '%s'.",
                len(job.articles), job.category,
            )
            return False
        return True

    def _run(self) -> None:
        while True:
            job = self._queue.get()
            try:
                if job is _STOP:
                    return
                self._process(job)
            finally:
                self._queue.task_done()

    def _process(self, job: IngestionJob) -> None:
        try:
            job.ok = self.ingestor.ingest(job.articles, job.category)
        except Exception:
            job.ok = False
            logger.exception("[WORKER] Background database save failed for '%s'", job.category)
            return
        if not job.ok:
            logger.error("[WORKER] Background database save failed for '%s'", job.category)

    def join(self) -> None:
        """Bloqueia até a fila esvaziar (útil em testes e no shutdown)."""
        self._queue.join()

    def stop(self, wait: bool = True) -> None:
        with self._lock:
            thread = self._thread
            if thread is None or not thread.is_alive():
                return
            self._queue.put(_STOP)
        if wait:
            thread.join()


class InlineIngestionWorker:
    """Mesma interface do IngestionWorker, mas roda o job na hora (testes)."""

    is_running = True

    def __init__(self, ingestor: ArticleIngestor):
        self.ingestor = ingestor
        self.jobs: List[IngestionJob] = []

    def start(self) -> None:
        pass

    def submit(self, job: IngestionJob) -> bool:
        job.ok = self.ingestor.ingest(job.articles, job.category)
        self.jobs.append(job)
        return True

    def join(self) -> None:
        pass

    def stop(self, wait: bool = True) -> None:
        pass
