"""필드 추출 — 선택된 카드 컨테이너를 광고 필드 7개로 분해.

라벨이 없는 마크업이므로 DOM 클래스 대신 위치(zone)와 길이, 키워드 정규식으로
필드를 구분한다. 컨테이너 내부 텍스트 노드를 위→아래, 왼→오른 순으로 정렬하고
동일 텍스트를 제거한 '라인 목록'이 모든 규칙의 입력이다.

- advertiser: 상단 35% 구역의 가장 짧은 라인 (2~30자)
- headline:   가장 긴 라인 (6~80자, 날짜 라벨 제외)
- schedule:   첫 날짜/시간 패턴 라인, 없으면 개강/설명회류 키워드 라인
- tags:       1~10자 짧은 칩 라인 (최대 12개)
- badges:     하단 65% 구역의 프로모션 키워드 라인 (최대 8개)
- image:      첫 이미지 (data: URI 제외, lazy-load 속성 폴백)
- link:       광고 리다이렉트 링크 우선, 없으면 첫 링크

필수 필드는 없다. 찾지 못한 필드는 None/빈 리스트로 남는다.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from processor.card_config import DEFAULT_EXTRACTION_CONFIG, ExtractionConfig
from processor.card_selector import CandidateContainer
from processor.document_model import BoundingBox, DocumentTree, PositionedNode


@dataclass(frozen=True)
class TextLine:
    text: str
    box: BoundingBox
    order: int


@dataclass
class RawAdCard:
    """정규화 전 추출 결과."""

    advertiser: str | None = None
    headline: str | None = None
    schedule: str | None = None
    tags: list[str] = field(default_factory=list)
    badges: list[str] = field(default_factory=list)
    image: str | None = None
    link: str | None = None


# ── 컨테이너 내부 노드/라인 ──

def _inner_nodes(container: PositionedNode, config: ExtractionConfig) -> list[PositionedNode]:
    """구조적(서브트리) + 기하학적(박스 포함)으로 컨테이너 안에 있는 노드."""
    tol = config.containment_tolerance
    return [n for n in container.iter_subtree() if container.box.contains(n.box, tol)]


def build_lines(
    tree: DocumentTree, container: PositionedNode, config: ExtractionConfig,
) -> list[TextLine]:
    nodes = [n for n in _inner_nodes(container, config) if n.text]
    nodes.sort(key=lambda n: (n.box.top, n.box.left, tree.order_of(n)))

    lines: list[TextLine] = []
    seen: set[str] = set()
    for n in nodes:
        if n.text in seen:
            continue
        seen.add(n.text)
        lines.append(TextLine(text=n.text, box=n.box, order=tree.order_of(n)))
    return lines


# ── 개별 필드 규칙 ──

def pick_headline(lines: list[TextLine], config: ExtractionConfig) -> str | None:
    best: str | None = None
    for line in lines:
        t = line.text
        if not (config.headline_min_len <= len(t) <= config.headline_max_len):
            continue
        if config.is_stop(t) or config.date_prefix_pattern.search(t):
            continue
        if best is None or len(t) > len(best):
            best = t
    return best


def pick_advertiser(
    lines: list[TextLine],
    container: BoundingBox,
    headline: str | None,
    config: ExtractionConfig,
) -> str | None:
    zone_bottom = container.top + container.height * config.advertiser_zone_ratio
    best: str | None = None
    for line in lines:
        t = line.text
        if line.box.top >= zone_bottom:
            continue
        if not (config.advertiser_min_len <= len(t) <= config.advertiser_max_len):
            continue
        if t == headline or config.is_stop(t) or config.match_schedule(t):
            continue
        if best is None or len(t) < len(best):
            best = t
    return best


def pick_schedule(
    lines: list[TextLine],
    headline: str | None,
    advertiser: str | None,
    config: ExtractionConfig,
) -> str | None:
    for line in lines:
        if not config.is_stop(line.text) and config.match_schedule(line.text):
            return line.text
    for line in lines:
        t = line.text
        if t in (headline, advertiser) or config.is_stop(t):
            continue
        if config.schedule_keyword_pattern.search(t):
            return t
    return None


def pick_tags(lines: list[TextLine], exclude: set[str], config: ExtractionConfig) -> list[str]:
    tags: list[str] = []
    for line in lines:
        t = line.text
        if not (config.tag_min_len <= len(t) <= config.tag_max_len):
            continue
        if t in exclude or config.is_stop(t) or config.numeric_pattern.match(t):
            continue
        if t not in tags:
            tags.append(t)
        if len(tags) >= config.tag_cap:
            break
    return tags


def pick_badges(
    lines: list[TextLine],
    container: BoundingBox,
    exclude: set[str],
    config: ExtractionConfig,
) -> list[str]:
    zone_top = container.top + container.height * config.badge_zone_ratio
    badges: list[str] = []
    for line in lines:
        t = line.text
        if line.box.top < zone_top:
            continue
        if not (config.badge_min_len <= len(t) <= config.badge_max_len):
            continue
        if t in exclude or config.is_stop(t) or not config.is_promo(t):
            continue
        if t not in badges:
            badges.append(t)
        if len(badges) >= config.badge_cap:
            break
    return badges


def _usable_src(src: str | None) -> bool:
    return bool(src) and not src.lower().startswith("data:")


def pick_image(nodes: list[PositionedNode]) -> str | None:
    for n in nodes:
        if not n.is_image:
            continue
        if _usable_src(n.image_src):
            return n.image_src
        if _usable_src(n.lazy_image_src):
            return n.lazy_image_src
    return None


def _navigable(href: str | None) -> bool:
    if not href:
        return False
    h = href.strip().lower()
    return h not in ("#", "") and not h.startswith("javascript:")


def pick_link(nodes: list[PositionedNode], config: ExtractionConfig) -> str | None:
    links = [n.href for n in nodes if n.is_link and _navigable(n.href)]
    for href in links:
        if config.markers.is_sponsor_href(href):
            return href
    return links[0] if links else None


def extract_fields(
    tree: DocumentTree,
    container: CandidateContainer | PositionedNode,
    config: ExtractionConfig | None = None,
) -> RawAdCard:
    """선택된 컨테이너 내부에서만 필드를 추출."""
    cfg = config or DEFAULT_EXTRACTION_CONFIG
    node = container.node if isinstance(container, CandidateContainer) else container
    box = node.box

    lines = build_lines(tree, node, cfg)
    headline = pick_headline(lines, cfg)
    advertiser = pick_advertiser(lines, box, headline, cfg)
    schedule = pick_schedule(lines, headline, advertiser, cfg)

    exclude = {t for t in (advertiser, headline, schedule) if t}
    inner = _inner_nodes(node, cfg)

    return RawAdCard(
        advertiser=advertiser,
        headline=headline,
        schedule=schedule,
        tags=pick_tags(lines, exclude, cfg),
        badges=pick_badges(lines, box, exclude, cfg),
        image=pick_image(inner),
        link=pick_link(inner, cfg),
    )
