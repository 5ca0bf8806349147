from datetime import datetime, timedelta, timezone
from typing import Optional

from .models import FeedResult, RawArticle

# Dataset fixo usado quando não há NEWS_API_KEY ou o provedor falha.
# (source_id, source_name, author, title, description, image, horas atrás, content)
_SAMPLE_ROWS = [
    (
        "sample-source-1",
        "Tech Daily",
        "Jane Doe",
        "AI Breakthrough in Natural Language Processing",
        "Researchers have made a significant breakthrough in teaching AI to understand and "
        "process natural language in context, with potential applications across multiple industries.",
        "https://placehold.co/600x400/5271ff/ffffff?text=AI+News",
        0,
        "Lorem ipsum dolor sit amet, consectetur adipiscing elit. "
        "Sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
    ),
    (
        "sample-source-2",
        "Financial Times",
        "John Smith",
        "Global Market Trends Indicate Economic Slowdown",
        "Recent global market indicators point to a potential economic slowdown in the coming "
        "quarters, with experts advising caution to investors.",
        "https://placehold.co/600x400/ff5252/ffffff?text=Economy",
        1,
        "Ut enim ad minim veniam, quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat.",
    ),
    (
        "sample-source-3",
        "Environmental News",
        "Emily Clark",
        "New Renewable Energy Project Launches",
        "A major renewable energy project has been launched, aiming to provide clean energy to "
        "over 100,000 homes and reduce carbon emissions significantly.",
        "https://placehold.co/600x400/52ff7a/000000?text=Green+Energy",
        2,
        "Duis aute irure dolor in reprehenderit in voluptate velit esse cillum dolore eu fugiat nulla pariatur.",
    ),
    (
        "sample-source-4",
        "Sports Update",
        "Michael Johnson",
        "Sports Team Announces New Stadium Plans",
        "The local sports team has announced plans for a new state-of-the-art stadium, set to be "
        "completed in the next three years.",
        "https://placehold.co/600x400/f8f8f8/333333?text=Sports+News",
        3,
        "Excepteur sint occaecat cupidatat non proident, sunt in culpa qui officia deserunt mollit anim id est laborum.",
    ),
]


def sample_feed(now: Optional[datetime] = None) -> FeedResult:
    """
    Retorna o dataset de fallback. O conteúdo é fixo; só o publishedAt
    depende de `now` (passe um valor fixo para resultado determinístico).
    """
    now = now or datetime.now(timezone.utc)
    articles = []
    for idx, (sid, sname, author, title, desc, image, hours_ago, content) in enumerate(_SAMPLE_ROWS, start=1):
        articles.append(RawArticle(
            source={"id": sid, "name": sname},
            author=author,
            title=title,
            description=desc,
            url=f"https://example.com/article{idx}",
            urlToImage=image,
            publishedAt=(now - timedelta(hours=hours_ago)).isoformat(),
            content=content,
        ))
    return FeedResult(status="ok", totalResults=len(articles), articles=articles, fallback=True)
