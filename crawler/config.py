"""크롤러 전역 설정."""

from pydantic_settings import BaseSettings


class CrawlerSettings(BaseSettings):
    # 타임아웃
    page_timeout_ms: int = 30_000
    navigation_timeout_ms: int = 60_000

    # 재시도 (네비게이션 단계만, 추출 엔진은 재시도하지 않음)
    max_retries: int = 1
    retry_delay_sec: float = 2.0

    # 브라우저
    headless: bool = True
    slow_mo_ms: int = 0
    launch_args: str = "--no-sandbox,--disable-setuid-sandbox"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    viewport_width: int = 1280
    viewport_height: int = 900
    locale: str = "ko-KR"
    timezone_id: str = "Asia/Seoul"

    # 검색 페이지
    search_url: str = "https://search.naver.com/search.naver?query={query}"
    wait_until: str = "domcontentloaded"
    # 카드형 광고 lazy 렌더링 대기
    render_wait_ms: int = 800

    model_config = {"env_prefix": "CRAWLER_"}


crawler_settings = CrawlerSettings()
