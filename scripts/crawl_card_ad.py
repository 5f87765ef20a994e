"""상단 카드형 광고 수집 CLI — 결과를 JSON으로 출력.

사용법:
    python scripts/crawl_card_ad.py --keyword "에듀윌 편입 강남"
    python scripts/crawl_card_ad.py --base "편입 강남"
    python scripts/crawl_card_ad.py --base "편입 강남" --academies "김영,해커스"
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_root))

from dotenv import load_dotenv

load_dotenv(_root / ".env")

from loguru import logger

from crawler.naver_card_ad import NaverCardAdCrawler
from processor.keyword_composer import compose_keywords, parse_names


async def run(args: argparse.Namespace) -> dict:
    async with NaverCardAdCrawler() as crawler:
        if args.keyword:
            return await crawler.crawl_keyword(args.keyword.strip())
        keywords = compose_keywords(args.base, parse_names(args.academies) or None)
        return await crawler.crawl_keywords(keywords)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="네이버 상단 카드형 광고 수집")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--keyword", help="단일 검색어")
    group.add_argument("--base", help="멀티 검색 기본어 (학원명 + base 합성)")
    parser.add_argument("--academies", help="콤마 구분 학원명 (기본: 김영,에듀윌,해커스)")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    result = asyncio.run(run(args))
    print(json.dumps(result, ensure_ascii=False, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
