"""카드 광고 정규화 — 추출 원본 → 응답 가능한 레코드로 변환.

공백(NBSP/zero-width 포함) 정리, 보일러플레이트 제거, 순서 유지 중복 제거,
필드별 개수 상한 적용. 두 번 적용해도 결과가 같다(idempotent).
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from processor.card_config import DEFAULT_EXTRACTION_CONFIG, ExtractionConfig
from processor.document_model import collapse_whitespace
from processor.field_extractor import RawAdCard


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


class ExtractedAdCard(BaseModel):
    """상단 카드형 광고 1건. 값이 없으면 None (빈 문자열 금지)."""

    advertiser: str | None = None
    headline: str | None = None
    schedule: str | None = None
    tags: list[str] = Field(default_factory=list)
    badges: list[str] = Field(default_factory=list)
    image: str | None = None
    link: str | None = None

    @field_validator("advertiser", "headline", "schedule", "image", "link", mode="before")
    @classmethod
    def clean_text(cls, v: str | None) -> str | None:
        if not v:
            return None
        return collapse_whitespace(str(v)) or None

    @field_validator("tags", "badges", mode="before")
    @classmethod
    def clean_list(cls, v: list[str] | None) -> list[str]:
        if not v:
            return []
        cleaned = [collapse_whitespace(str(s)) for s in v if s]
        return _dedupe([s for s in cleaned if s])


def normalize_card(
    raw: RawAdCard | ExtractedAdCard,
    config: ExtractionConfig | None = None,
) -> ExtractedAdCard:
    """스톱리스트 제거 + 상한 적용 후 ExtractedAdCard 반환."""
    cfg = config or DEFAULT_EXTRACTION_CONFIG
    card = ExtractedAdCard(
        advertiser=raw.advertiser,
        headline=raw.headline,
        schedule=raw.schedule,
        tags=list(raw.tags),
        badges=list(raw.badges),
        image=raw.image,
        link=raw.link,
    )

    def _keep(value: str | None) -> str | None:
        return None if value is None or cfg.is_stop(value) else value

    return ExtractedAdCard(
        advertiser=_keep(card.advertiser),
        headline=_keep(card.headline),
        schedule=_keep(card.schedule),
        tags=[t for t in card.tags if not cfg.is_stop(t)][: cfg.tag_cap],
        badges=[b for b in card.badges if not cfg.is_stop(b)][: cfg.badge_cap],
        image=_keep(card.image),
        link=_keep(card.link),
    )
