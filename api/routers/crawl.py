"""상단 카드 광고 크롤링 API — 단일 키워드 / 멀티 키워드."""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from api.deps import get_crawler_factory
from crawler.base_crawler import BaseCrawler
from processor.keyword_composer import compose_keywords, parse_names

logger = logging.getLogger("cardad.api")

router = APIRouter(tags=["crawl"])

USAGE = "\n".join([
    "crawler-service is running.",
    "",
    "Endpoints:",
    "  GET /health",
    "  GET /crawl?keyword=에듀윌 편입 강남",
    "  GET /crawl-multi?base=편입 강남",
    "",
    "Query:",
    "  /crawl       -> keyword (required)",
    "  /crawl-multi -> base (required), academies (optional, comma list)",
    "                  // 기본값: 김영/에듀윌/해커스로 합성 검색",
])


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root():
    return USAGE


@router.get("/health")
async def health():
    return {"ok": True}


@router.get("/crawl")
async def crawl(
    keyword: str = Query(default=""),
    crawler_factory: Callable[[], BaseCrawler] = Depends(get_crawler_factory),
):
    """단일 크롤링: 상단 '큰 카드 광고' 1개."""
    keyword = keyword.strip()
    if not keyword:
        return JSONResponse(status_code=400, content={"error": "keyword is required"})

    started = time.monotonic()
    try:
        async with crawler_factory() as crawler:
            result = await crawler.crawl_keyword(keyword)
    except Exception as e:
        logger.error("crawl failed for %r: %s", keyword, e)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "keyword": keyword,
                "error": str(e) or e.__class__.__name__,
                "crawledAt": _now_iso(),
                "elapsedMs": _elapsed_ms(started),
            },
        )

    return {
        "success": True,
        "keyword": keyword,
        "url": result.get("url"),
        "ad": result.get("ad"),
        "crawledAt": _now_iso(),
        "elapsedMs": _elapsed_ms(started),
    }


@router.get("/crawl-multi")
async def crawl_multi(
    base: str = Query(default=""),
    academies: str | None = Query(default=None),
    crawler_factory: Callable[[], BaseCrawler] = Depends(get_crawler_factory),
):
    """멀티 크롤링: 학원명 + base 합성 키워드마다 상단 카드 광고 1개씩."""
    base = base.strip()
    if not base:
        return JSONResponse(status_code=400, content={"error": "base is required"})

    names = parse_names(academies) or None
    keywords = compose_keywords(base, names)

    started = time.monotonic()
    try:
        async with crawler_factory() as crawler:
            raw = await crawler.crawl_keywords(keywords)
    except Exception as e:
        logger.error("crawl-multi failed for %r: %s", base, e)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "base": base,
                "error": str(e) or e.__class__.__name__,
                "crawledAt": _now_iso(),
                "elapsedMs": _elapsed_ms(started),
            },
        )

    results = {}
    for label, r in raw.items():
        entry = {
            "academy": label,
            "keyword": r.get("keyword", keywords[label]),
            "url": r.get("url"),
            "ad": r.get("ad"),
        }
        if r.get("error"):
            entry["error"] = r["error"]
        results[label] = entry

    return {
        "success": True,
        "base": base,
        "results": results,
        "crawledAt": _now_iso(),
        "elapsedMs": _elapsed_ms(started),
    }
