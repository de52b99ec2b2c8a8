"""Render articles as WhatsApp-formatted message text."""

from typing import Iterable

from newsbridge.models import Article

BREAKING_HEADER = "*🚨 Breaking News 🚨*"
LATEST_HEADER = "*📰 Latest News*"
NOTIFICATION_HEADER = "*🔔 New Article*"

NO_NEWS_TEXT = "No news available right now."
NO_RESULTS_TEXT = "No results found."

HELP_TEXT = (
    "*📰 News Bot Commands*\n\n"
    "!latest - latest headlines\n"
    "!breaking - breaking news\n"
    "!search <text> - search articles\n"
    "!read <id> - read a full article\n"
    "!notify or !start - get new-article alerts\n"
    "!stop - stop new-article alerts\n"
    "!help - show this message"
)


def format_breaking(articles: Iterable[Article]) -> str:
    items = [f"📌 *{a.headline}*\n🔗 {a.url}" for a in articles]
    if not items:
        return NO_NEWS_TEXT
    return BREAKING_HEADER + "\n\n" + "\n\n".join(items)


def format_latest(articles: Iterable[Article]) -> str:
    items = [f"Title: *{a.headline}*" for a in articles]
    if not items:
        return NO_NEWS_TEXT
    return LATEST_HEADER + "\n\n" + "\n\n".join(items)


def format_search_results(query: str, articles: Iterable[Article]) -> str:
    items = [f"📌 *{a.headline}*\n🆔 {a.id}\n🔗 {a.url}" for a in articles]
    if not items:
        return NO_RESULTS_TEXT
    return f'*🔎 Results for "{query}"*' + "\n\n" + "\n\n".join(items)


def format_article(article: Article) -> str:
    """Full article body for the !read command."""
    parts = [f"*{article.headline}*"]
    if article.published_date:
        parts.append(f"📅 {article.published_date}")
    if article.full_text:
        parts.append(article.full_text.strip())
    if article.url:
        parts.append(f"🔗 {article.url}")
    return "\n\n".join(parts)


def excerpt(text: str | None, max_chars: int) -> str:
    """Trim text to max_chars on a word boundary, with an ellipsis."""
    if not text or max_chars <= 0:
        return ""
    text = text.strip()
    if len(text) <= max_chars:
        return text
    cut = text[:max_chars].rsplit(" ", 1)[0].rstrip()
    return (cut or text[:max_chars]) + "…"


def format_notification(article: Article, excerpt_chars: int = 300) -> str:
    parts = [NOTIFICATION_HEADER, f"*{article.headline}*"]
    summary = excerpt(article.full_text, excerpt_chars)
    if summary:
        parts.append(summary)
    if article.url:
        parts.append(f"🔗 {article.url}")
    parts.append(f"Reply !read {article.id} for the full story.")
    return "\n\n".join(parts)
