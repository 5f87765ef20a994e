"""크롤러 베이스 클래스 — 브라우저 세션 수명주기 + 키워드 배치 실행."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timezone

from loguru import logger
from playwright.async_api import Browser, BrowserContext, async_playwright

from crawler.config import CrawlerSettings, crawler_settings


class BaseCrawler(ABC):
    """브라우저 1개를 요청(또는 배치) 단위로 점유하는 크롤러 베이스."""

    channel: str = ""  # 하위 클래스에서 override

    def __init__(self, settings: CrawlerSettings | None = None):
        self.settings = settings or crawler_settings
        self._playwright = None
        self._browser: Browser | None = None

    # ── Lifecycle ──

    async def start(self):
        """Playwright 브라우저 시작."""
        self._playwright = await async_playwright().start()
        args = [a.strip() for a in self.settings.launch_args.split(",") if a.strip()]
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.headless,
                slow_mo=self.settings.slow_mo_ms or None,
                args=args,
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info(f"[{self.channel}] 브라우저 시작 (headless={self.settings.headless})")

    async def stop(self):
        """브라우저 종료. 종료 중 오류는 기록만 하고 다음 정리를 계속한다."""
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"[{self.channel}] 브라우저 종료 실패: {e}")
            self._browser = None
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"[{self.channel}] playwright 종료 실패: {e}")
            self._playwright = None
        logger.info(f"[{self.channel}] 브라우저 종료")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, *args):
        await self.stop()

    # ── Context 생성 ──

    async def _create_context(self) -> BrowserContext:
        """UA/뷰포트/로케일 설정으로 브라우저 컨텍스트 생성."""
        if self._browser is None:
            raise RuntimeError(f"[{self.channel}] browser not started")
        s = self.settings
        context = await self._browser.new_context(
            viewport={"width": s.viewport_width, "height": s.viewport_height},
            user_agent=s.user_agent,
            locale=s.locale,
            timezone_id=s.timezone_id,
        )
        context.set_default_timeout(s.page_timeout_ms)
        context.set_default_navigation_timeout(s.navigation_timeout_ms)
        return context

    # ── 재시도 래퍼 ──

    async def _with_retry(self, coro_func, *args, **kwargs):
        """재시도 로직 래퍼 (max_retries=1 이면 단일 시도)."""
        attempts = max(1, self.settings.max_retries)
        for attempt in range(1, attempts + 1):
            try:
                return await coro_func(*args, **kwargs)
            except Exception as e:
                logger.warning(f"[{self.channel}] 시도 {attempt}/{attempts} 실패: {e}")
                if attempt == attempts:
                    raise
                await asyncio.sleep(self.settings.retry_delay_sec * attempt)

    # ── 추상 메서드 (하위 클래스에서 구현) ──

    @abstractmethod
    async def crawl_keyword(self, keyword: str) -> dict:
        """키워드 하나에 대해 상단 광고를 수집.

        Returns:
            {
                "keyword": str,
                "url": str,
                "ad": dict | None,
                "captured_at": datetime,
                "crawl_duration_ms": int,
            }
        """
        ...

    async def crawl_keywords(self, keywords: Mapping[str, str]) -> dict[str, dict]:
        """라벨별 키워드를 순차 수집. 한 키워드 실패가 나머지를 중단시키지 않는다."""
        results: dict[str, dict] = {}
        for label, kw in keywords.items():
            try:
                result = await self._with_retry(self.crawl_keyword, kw)
                results[label] = result
                logger.info(
                    f"[{self.channel}] '{kw}' 수집 완료 — "
                    f"광고 {'있음' if result.get('ad') else '없음'}"
                )
            except Exception as e:
                logger.error(f"[{self.channel}] '{kw}' 수집 실패: {e}")
                results[label] = {
                    "keyword": kw,
                    "url": None,
                    "ad": None,
                    "captured_at": datetime.now(timezone.utc),
                    "error": str(e) or e.__class__.__name__,
                }
        return results
