from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from newsroom.storage.models import ArticleORM
from newsroom.utils.tz_utils import utc_aware


class ArticleOut(BaseModel):
    """Artigo enriquecido exposto para a UI (somente leitura)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str
    url_to_image: Optional[str] = None
    published_at: datetime
    sentiment: Optional[str] = None
    summary: Optional[str] = None
    source: Optional[str] = None
    categories: List[str] = []

    @classmethod
    def from_orm_row(cls, row: ArticleORM) -> "ArticleOut":
        return cls(
            id=row.id,
            title=row.title,
            description=row.description,
            content=row.content,
            url=row.url,
            url_to_image=row.url_to_image,
            published_at=utc_aware(row.published_at),
            sentiment=row.sentiment,
            summary=row.summary,
            source=row.source.name if row.source else None,
            categories=sorted(c.name for c in row.categories),
        )
