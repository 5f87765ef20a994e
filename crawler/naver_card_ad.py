"""네이버 검색 상단 카드형 광고 크롤러.

검색 결과 페이지를 렌더링한 뒤 위치 노드 스냅샷을 떠서
processor.card_pipeline 으로 '상단 큰 카드 광고' 1건을 추출한다.
DOM 클래스명에 의존하지 않는다 (마크업이 수시로 바뀜).
"""

from datetime import datetime, timezone
from urllib.parse import quote

from loguru import logger
from playwright.async_api import Page

from crawler.base_crawler import BaseCrawler
from crawler.config import CrawlerSettings
from crawler.page_snapshot import capture_document
from processor.card_pipeline import CardAdExtractor
from processor.normalizer import ExtractedAdCard


class NaverCardAdCrawler(BaseCrawler):
    """키워드별 네이버 검색 → 상단 카드 광고 1건."""

    channel = "naver_card_ad"

    def __init__(
        self,
        settings: CrawlerSettings | None = None,
        extractor: CardAdExtractor | None = None,
    ):
        super().__init__(settings)
        self.extractor = extractor or CardAdExtractor()

    def search_url(self, keyword: str) -> str:
        return self.settings.search_url.format(query=quote(keyword))

    async def extract_top_ad(self, page: Page) -> ExtractedAdCard | None:
        """이미 렌더링된 페이지에서 상단 카드 광고 추출 (없으면 None)."""
        tree = await capture_document(page, self.extractor.config)
        return self.extractor.extract(tree)

    async def _open(self, page: Page, url: str):
        await page.goto(url, wait_until=self.settings.wait_until)

    async def crawl_keyword(self, keyword: str) -> dict:
        """네이버에서 키워드 검색 후 상단 카드 광고 수집."""
        start_time = datetime.now(timezone.utc)
        url = self.search_url(keyword)

        context = await self._create_context()
        page = await context.new_page()
        try:
            await self._open(page, url)
            # 카드형 광고가 lazy로 뜰 때가 있어 약간 기다림
            if self.settings.render_wait_ms:
                await page.wait_for_timeout(self.settings.render_wait_ms)

            card = await self.extract_top_ad(page)
            if card is None:
                logger.info("[{}] '{}' 카드 광고 없음", self.channel, keyword)

            elapsed = int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)
            return {
                "keyword": keyword,
                "url": url,
                "ad": card.model_dump() if card else None,
                "captured_at": datetime.now(timezone.utc),
                "crawl_duration_ms": elapsed,
            }
        finally:
            try:
                await page.close()
            finally:
                await context.close()
