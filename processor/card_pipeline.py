"""상단 카드형 광고 추출 파이프라인.

문서 트리 → 마커 감지 → 컨테이너 선택 → 필드 추출 → 정규화.
광고가 없으면 None을 반환한다 (오류 아님).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from loguru import logger

from processor.ad_marker import find_markers
from processor.card_config import DEFAULT_EXTRACTION_CONFIG, ExtractionConfig
from processor.card_selector import DEFAULT_SCORING_RULES, ScoringRule, select_best_container
from processor.document_model import DocumentTree, build_document
from processor.field_extractor import extract_fields
from processor.normalizer import ExtractedAdCard, normalize_card


class CardAdExtractor:
    """설정(사전/가중치)을 생성 시 주입받는 단일 카드 추출기."""

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        rules: Sequence[ScoringRule] = DEFAULT_SCORING_RULES,
    ):
        self.config = config or DEFAULT_EXTRACTION_CONFIG
        self.rules = tuple(rules)

    def build(self, snapshot: Mapping, page_url: str | None = None) -> DocumentTree:
        return build_document(snapshot, page_url=page_url, config=self.config)

    def extract(self, tree: DocumentTree) -> ExtractedAdCard | None:
        markers = find_markers(tree, self.config.markers)
        if not markers:
            logger.debug("[card_ad] no sponsor marker on {}", tree.page_url or "page")
            return None

        container = select_best_container(tree, markers, self.config, self.rules)
        if container is None:
            return None

        raw = extract_fields(tree, container, self.config)
        card = normalize_card(raw, self.config)
        logger.debug(
            "[card_ad] extracted: advertiser={!r} headline={!r} tags={} badges={}",
            card.advertiser, card.headline, len(card.tags), len(card.badges),
        )
        return card


def extract_top_ad(
    tree: DocumentTree | Mapping,
    config: ExtractionConfig | None = None,
) -> ExtractedAdCard | None:
    """트리(또는 스냅샷 dict)에서 상단 카드 광고 1건 추출."""
    extractor = CardAdExtractor(config)
    if not isinstance(tree, DocumentTree):
        tree = extractor.build(tree)
    return extractor.extract(tree)
