"""카드형 광고 추출 휴리스틱 설정 — 가중치/임계값/사전을 이름 있는 상수로 관리.

모든 값은 불변(frozen) 설정 객체로 파이프라인 생성 시 주입된다.
테스트나 튜닝 시에는 ``dataclasses.replace`` 로 대체 사전을 만든다::

    cfg = replace(DEFAULT_EXTRACTION_CONFIG, tag_cap=5)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import urlparse


@dataclass(frozen=True)
class AdMarkerPattern:
    """스폰서(광고) 신호 — 라벨 텍스트 + 리다이렉트 도메인."""

    labels: frozenset[str] = frozenset({"광고", "Ad", "AD"})
    sponsor_domains: tuple[str, ...] = (
        "ad.search.naver.com",
        "adcr.naver.com",
        "ad.naver.com",
    )

    def is_label(self, text: str | None) -> bool:
        return bool(text) and text.strip() in self.labels

    def is_sponsor_href(self, href: str | None) -> bool:
        if not href:
            return False
        try:
            host = (urlparse(href).hostname or "").lower()
        except ValueError:
            return False
        return bool(host) and any(d in host for d in self.sponsor_domains)


# ── 사전 (한국어 원문 + 영문 대응) ──

_PROMO_RE = re.compile(
    r"(예약|상담|환급|지원|패스|무료|체험|이벤트|합격|개강|설명회|특강|쿠폰|할인|증정|특가"
    r"|free|consult|discount|refund|event|coupon|sale|gift|trial|bonus)",
    re.IGNORECASE,
)

_SCHEDULE_RES: tuple[re.Pattern, ...] = (
    re.compile(r"\d{1,2}\s*/\s*\d{1,2}(?:\s*\([^)]{1,5}\))?"),
    re.compile(r"\d{1,2}\s*월\s*\d{1,2}\s*일"),
    re.compile(r"20\d{2}\s*[.\-/]\s*\d{1,2}\s*[.\-/]\s*\d{1,2}"),
    re.compile(r"\b\d{1,2}\.\d{1,2}\.?\s*\([^)]{1,5}\)"),
    re.compile(r"\b\d{1,2}:\d{2}\b"),
)

_SCHEDULE_KEYWORD_RE = re.compile(
    r"(개강|설명회|모집|접수|특강|입학|수강신청|enroll|session|semester)",
    re.IGNORECASE,
)

# 헤드라인 제외용 — 날짜로 시작하는 라벨 (1/22(목), 3월 5일 ...)
_DATE_PREFIX_RE = re.compile(
    r"^\s*(?:\d{1,2}\s*/\s*\d{1,2}|\d{1,2}\s*월\s*\d{1,2}\s*일|20\d{2}\s*[.\-/]\s*\d{1,2})"
)

_NUMERIC_RE = re.compile(r"^[\d\s.,:%+\-~/()]+$")

_STOPLIST = frozenset(
    s.casefold()
    for s in (
        "광고", "Ad", "AD", "Sponsored", "새소식", "더보기", "펼치기", "접기", "닫기",
        "이전", "다음", "공유", "공유하기", "신고", "정보", "도움말",
        "본문 바로가기", "skip to content", "skip to main content",
        "네이버 로그인", "네이버로그인", "네이버 톡톡", "네이버톡톡", "네이버페이",
        "NAVER", "네이버", "img", "image",
    )
)


@dataclass(frozen=True)
class ExtractionConfig:
    """카드 광고 식별/필드 분해에 쓰이는 모든 휴리스틱 파라미터."""

    markers: AdMarkerPattern = field(default_factory=AdMarkerPattern)

    # 문서 모델 — 가시성 하한
    min_node_width: float = 50
    min_node_height: float = 30

    # 후보 컨테이너 탐색/점수
    max_ancestor_depth: int = 12
    weight_image: float = 3.0
    weight_sponsor_link: float = 3.0
    weight_chip: float = 0.5
    chip_cap: int = 6
    chip_min_len: int = 1
    chip_max_len: int = 10
    weight_interactive: float = 2.0
    interactive_min_count: int = 3
    weight_promo: float = 2.0
    weight_sponsor_label: float = 1.0
    weight_multi_card: float = 4.0
    weight_oversize: float = 10.0
    max_container_text: int = 1500
    viable_min_interactive: int = 2

    # 필드 추출
    containment_tolerance: float = 2.0
    advertiser_zone_ratio: float = 0.35
    advertiser_min_len: int = 2
    advertiser_max_len: int = 30
    headline_min_len: int = 6
    headline_max_len: int = 80
    tag_min_len: int = 1
    tag_max_len: int = 10
    tag_cap: int = 12
    badge_zone_ratio: float = 0.35  # 컨테이너 상단 35% 아래 = 하단 65%
    badge_min_len: int = 3
    badge_max_len: int = 30
    badge_cap: int = 8

    # 사전
    promo_pattern: re.Pattern = _PROMO_RE
    schedule_patterns: tuple[re.Pattern, ...] = _SCHEDULE_RES
    schedule_keyword_pattern: re.Pattern = _SCHEDULE_KEYWORD_RE
    date_prefix_pattern: re.Pattern = _DATE_PREFIX_RE
    numeric_pattern: re.Pattern = _NUMERIC_RE
    stoplist: frozenset[str] = _STOPLIST

    def is_stop(self, text: str | None) -> bool:
        if not text:
            return False
        t = text.strip()
        return t.casefold() in self.stoplist or self.markers.is_label(t)

    def is_promo(self, text: str | None) -> bool:
        return bool(text) and bool(self.promo_pattern.search(text))

    def match_schedule(self, text: str | None) -> bool:
        return bool(text) and any(p.search(text) for p in self.schedule_patterns)


DEFAULT_EXTRACTION_CONFIG = ExtractionConfig()
