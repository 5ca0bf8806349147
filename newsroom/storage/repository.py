from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from newsroom.storage.models import ArticleCategoryORM, ArticleORM, CategoryORM, SourceORM

DEFAULT_SOURCE_LANGUAGE = "en"
DEFAULT_SOURCE_COUNTRY = "us"


def _lookup(db: Session, model, **keys):
    return db.execute(select(model).filter_by(**keys)).scalar_one_or_none()


def _find_or_create(db: Session, model, defaults: Optional[Dict[str, Any]] = None, **keys):
    """
    Busca pela chave única; se não existir, tenta inserir num SAVEPOINT.
    IntegrityError = outro writer inseriu a mesma chave entre o SELECT e o INSERT,
    então relê a linha dele.
    """
    row = _lookup(db, model, **keys)
    if row is not None:
        return row
    try:
        with db.begin_nested():
            row = model(**keys, **(defaults or {}))
            db.add(row)
    except IntegrityError:
        row = db.execute(select(model).filter_by(**keys)).scalar_one()
    return row


def find_or_create_category(db: Session, name: str) -> CategoryORM:
    return _find_or_create(db, CategoryORM, name=name)


def find_or_create_source(db: Session, name: str, category: Optional[str] = None) -> SourceORM:
    return _find_or_create(
        db,
        SourceORM,
        defaults={
            "description": None,
            "url": None,
            "category": category,
            "language": DEFAULT_SOURCE_LANGUAGE,
            "country": DEFAULT_SOURCE_COUNTRY,
        },
        name=name,
    )


def get_article_by_url(db: Session, url: str) -> Optional[ArticleORM]:
    return _lookup(db, ArticleORM, url=url)


def create_article(db: Session, **fields) -> Optional[ArticleORM]:
    """Insere o artigo; retorna None se a URL já existir (corrida com outro batch)."""
    try:
        with db.begin_nested():
            article = ArticleORM(**fields)
            db.add(article)
    except IntegrityError:
        return None
    return article


def link_article_category(db: Session, article_id: int, category_id: int) -> bool:
    try:
        with db.begin_nested():
            db.add(ArticleCategoryORM(article_id=article_id, category_id=category_id))
    except IntegrityError:
        return False
    return True


def list_articles(
    db: Session,
    category: Optional[str] = None,
    sentiment: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> List[ArticleORM]:
    stmt = (
        select(ArticleORM)
        .options(selectinload(ArticleORM.source), selectinload(ArticleORM.categories))
        .order_by(ArticleORM.published_at.desc(), ArticleORM.id.desc())
    )
    if category:
        stmt = (
            stmt.join(ArticleCategoryORM, ArticleCategoryORM.article_id == ArticleORM.id)
            .join(CategoryORM, CategoryORM.id == ArticleCategoryORM.category_id)
            .where(CategoryORM.name == category)
        )
    if sentiment:
        stmt = stmt.where(ArticleORM.sentiment == sentiment)
    if offset:
        stmt = stmt.offset(offset)
    if limit:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars())


def get_article(db: Session, article_id: int) -> Optional[ArticleORM]:
    stmt = (
        select(ArticleORM)
        .options(selectinload(ArticleORM.source), selectinload(ArticleORM.categories))
        .where(ArticleORM.id == article_id)
    )
    return db.execute(stmt).scalar_one_or_none()


def list_categories(db: Session) -> List[str]:
    return list(db.execute(select(CategoryORM.name).order_by(CategoryORM.name)).scalars())


def count_rows(db: Session) -> Dict[str, int]:
    return {
        model.__tablename__: db.execute(select(func.count()).select_from(model)).scalar_one()
        for model in (SourceORM, CategoryORM, ArticleORM, ArticleCategoryORM)
    }
