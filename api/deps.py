"""FastAPI dependencies — crawler factory (override in tests)."""

from collections.abc import Callable

from crawler.base_crawler import BaseCrawler
from crawler.naver_card_ad import NaverCardAdCrawler


def get_crawler_factory() -> Callable[[], BaseCrawler]:
    """요청마다 새 브라우저 세션을 여는 크롤러 생성자."""
    return NaverCardAdCrawler
