"""Verify connectivity to the news API endpoints."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from newsbridge.config import load_config
from newsbridge.news.client import NewsClient, NewsClientError


def check_list(name: str, fetch) -> list | None:
    print(f"\nChecking {name}...")
    try:
        articles = fetch()
        print(f"  Fetched {len(articles)} articles")
        if articles:
            print(f"  First: [{articles[0].id}] {articles[0].headline[:80]}")
        print(f"  {name}: OK")
        return articles
    except NewsClientError as e:
        print(f"  {name}: FAILED - {e}")
        return None


def check_article(client: NewsClient, article_id) -> bool:
    print("\nChecking article by id...")
    try:
        article = client.article_by_id(article_id)
        print(f"  Headline: {article.headline[:80]}")
        print(f"  Full text: {'yes' if article.full_text else 'no'}")
        print(f"  Thumbnail: {article.thumbnail_url or 'none'}")
        print("  Article: OK")
        return True
    except NewsClientError as e:
        print(f"  Article: FAILED - {e}")
        return False


def main():
    print("=" * 50)
    print("newsbridge - News API Connectivity Check")
    print("=" * 50)

    config = load_config(Path("config/settings.yaml"))
    client = NewsClient(config.news_api)
    print(f"Base URL: {config.news_api.base_url}")

    latest = check_list("latest news", lambda: client.latest(limit=3))
    breaking = check_list("breaking news", lambda: client.breaking(limit=3))
    search = check_list("search", lambda: client.search("news"))

    results = [latest is not None, breaking is not None, search is not None]
    if latest:
        results.append(check_article(client, latest[0].id))
    else:
        print("\nSkipping article by id: no article id available")
        results.append(False)

    print("\n" + "=" * 50)
    if all(results):
        print("All checks passed.")
    else:
        print("Some checks failed. Fix the issues above.")
        sys.exit(1)


if __name__ == "__main__":
    main()
