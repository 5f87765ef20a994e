"""멀티 키워드 합성 — 기본 검색어 + 학원명 목록 → 라벨별 검색어.

base="편입 강남" → {"김영": "김영 편입 강남", "에듀윌": "에듀윌 편입 강남", ...}
"""

from __future__ import annotations

from collections.abc import Iterable

DEFAULT_ACADEMIES: tuple[str, ...] = ("김영", "에듀윌", "해커스")


def parse_names(raw: str | None) -> list[str]:
    """콤마 구분 문자열 → 이름 목록 (공백/빈 항목 제거)."""
    if not raw:
        return []
    return [n.strip() for n in raw.split(",") if n.strip()]


def compose_keywords(base: str, names: Iterable[str] | None = None) -> dict[str, str]:
    """라벨(이름) → 합성 검색어. 입력 순서 유지, 중복 이름은 한 번만."""
    base = " ".join((base or "").split())
    keywords: dict[str, str] = {}
    for name in DEFAULT_ACADEMIES if names is None else names:
        name = " ".join((name or "").split())
        if not name or name in keywords:
            continue
        keywords[name] = f"{name} {base}".strip()
    return keywords
