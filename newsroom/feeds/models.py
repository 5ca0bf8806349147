from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeedSource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: str = "Unknown"

    @field_validator("name", mode="before")
    @classmethod
    def _blank_name(cls, v):
        # NewsAPI às vezes manda name=null
        if v is None or not str(v).strip():
            return "Unknown"
        return str(v).strip()


class RawArticle(BaseModel):
    """Artigo como chega do provedor (mesmo schema do NewsAPI)."""

    model_config = ConfigDict(extra="ignore")

    source: FeedSource = Field(default_factory=FeedSource)
    author: Optional[str] = None
    title: str
    description: Optional[str] = None
    url: str  # chave canônica de dedup
    urlToImage: Optional[str] = None
    publishedAt: Optional[str] = None
    content: Optional[str] = None

    @field_validator("source", mode="before")
    @classmethod
    def _null_source(cls, v):
        # source=null vira fonte "Unknown", igual a name=null
        return {} if v is None else v

    def richest_text(self) -> str:
        # corpo > descrição > título
        return self.content or self.description or self.title or ""


class FeedResult(BaseModel):
    status: str = "ok"
    totalResults: int = 0
    articles: List[RawArticle] = Field(default_factory=list)
    # não vai para o JSON de resposta
    fallback: bool = Field(default=False, exclude=True)
