"""후보 컨테이너 점수화 + 최상단 카드 선택.

각 마커에서 조상 방향으로 최대 12단계까지 올라가며 후보 컨테이너를 평가한다.
점수는 가중치가 붙은 규칙(ScoringRule)의 순서 있는 목록으로 계산되고,
후보 간 비교는 (점수, 상단 y, 광고 링크 유무, 면적, 문서 순서) 키로 결정된다.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from processor.ad_marker import is_label_marker, is_link_marker
from processor.card_config import DEFAULT_EXTRACTION_CONFIG, ExtractionConfig
from processor.document_model import DocumentTree, PositionedNode


@dataclass(frozen=True)
class NodeFeatures:
    """점수 규칙이 참조하는 서브트리 요약."""

    text_length: int
    has_image: bool
    has_sponsor_link: bool
    sponsor_label_count: int
    has_promo_keyword: bool
    short_fragment_count: int
    interactive_count: int


def compute_features(node: PositionedNode, config: ExtractionConfig) -> NodeFeatures:
    pattern = config.markers
    has_image = has_link = False
    labels = 0
    interactive = 0
    fragments: set[str] = set()

    for n in node.iter_subtree():
        if n.is_image:
            has_image = True
        if is_link_marker(n, pattern):
            has_link = True
        if is_label_marker(n, pattern):
            labels += 1
        if n.is_interactive:
            interactive += 1
        if n.text and config.chip_min_len <= len(n.text) <= config.chip_max_len:
            fragments.add(n.text)

    full_text = node.full_text
    return NodeFeatures(
        text_length=len(full_text),
        has_image=has_image,
        has_sponsor_link=has_link,
        sponsor_label_count=labels,
        has_promo_keyword=config.is_promo(full_text),
        short_fragment_count=len(fragments),
        interactive_count=interactive,
    )


@dataclass(frozen=True)
class ScoringRule:
    """가중치 규칙 하나 — contribution(features, config) -> 점수 기여분."""

    name: str
    contribution: Callable[[NodeFeatures, ExtractionConfig], float]

    def __call__(self, features: NodeFeatures, config: ExtractionConfig) -> float:
        return self.contribution(features, config)


DEFAULT_SCORING_RULES: tuple[ScoringRule, ...] = (
    ScoringRule("image", lambda f, c: c.weight_image if f.has_image else 0.0),
    ScoringRule("sponsor_link", lambda f, c: c.weight_sponsor_link if f.has_sponsor_link else 0.0),
    ScoringRule("chip_density", lambda f, c: c.weight_chip * min(f.short_fragment_count, c.chip_cap)),
    ScoringRule(
        "interactive",
        lambda f, c: c.weight_interactive if f.interactive_count >= c.interactive_min_count else 0.0,
    ),
    ScoringRule("promo_keyword", lambda f, c: c.weight_promo if f.has_promo_keyword else 0.0),
    ScoringRule("sponsor_label", lambda f, c: c.weight_sponsor_label if f.sponsor_label_count else 0.0),
    # 광고 라벨이 2개 이상 = 카드 여러 장을 감싼 래퍼
    ScoringRule(
        "multi_card",
        lambda f, c: -c.weight_multi_card if f.sponsor_label_count > 1 else 0.0,
    ),
    ScoringRule(
        "oversize_text",
        lambda f, c: -c.weight_oversize if f.text_length > c.max_container_text else 0.0,
    ),
)


def score_features(
    features: NodeFeatures,
    config: ExtractionConfig,
    rules: Sequence[ScoringRule] = DEFAULT_SCORING_RULES,
) -> float:
    return sum(rule(features, config) for rule in rules)


def is_viable(features: NodeFeatures, config: ExtractionConfig) -> bool:
    """최소 요건: 텍스트가 있고, 이미지 1개 이상 또는 인터랙티브 요소 2개 이상."""
    if features.text_length == 0:
        return False
    return features.has_image or features.interactive_count >= config.viable_min_interactive


@dataclass(frozen=True)
class CandidateContainer:
    node: PositionedNode
    score: float
    top_y: float
    area: float
    has_sponsor_link: bool
    order: int = 0

    @property
    def sort_key(self) -> tuple:
        # 위쪽 → 광고 링크 보유 → 넓은 면적 → 점수 → 문서 순서
        # 점수는 마커별 조상 선택에만 쓰고, 카드 간에는 위치가 우선
        return (self.top_y, not self.has_sponsor_link, -self.area, -self.score, self.order)


def select_best_container(
    tree: DocumentTree,
    markers: Sequence[PositionedNode],
    config: ExtractionConfig | None = None,
    rules: Sequence[ScoringRule] = DEFAULT_SCORING_RULES,
) -> CandidateContainer | None:
    """마커별 최고 조상 후보를 모아 단일 컨테이너 선택. 없으면 None."""
    cfg = config or DEFAULT_EXTRACTION_CONFIG
    features_cache: dict[PositionedNode, NodeFeatures] = {}
    candidates: dict[PositionedNode, CandidateContainer] = {}

    for marker in markers:
        chain = [marker, *tree.ancestors(marker, cfg.max_ancestor_depth)]
        best: CandidateContainer | None = None
        for node in chain:
            features = features_cache.get(node)
            if features is None:
                features = compute_features(node, cfg)
                features_cache[node] = features
            if not is_viable(features, cfg):
                continue
            score = score_features(features, cfg, rules)
            # 동점이면 마커에 더 가까운 조상 유지
            if best is None or score > best.score:
                best = CandidateContainer(
                    node=node,
                    score=score,
                    top_y=node.box.top,
                    area=node.box.area,
                    has_sponsor_link=features.has_sponsor_link,
                    order=tree.order_of(node),
                )
        if best is not None:
            candidates.setdefault(best.node, best)

    if not candidates:
        logger.debug("[card_ad] no viable container among {} markers", len(markers))
        return None

    winner = min(candidates.values(), key=lambda c: c.sort_key)
    logger.debug(
        "[card_ad] container selected: score={} top={} area={} ({} candidates)",
        winner.score, winner.top_y, winner.area, len(candidates),
    )
    return winner
