"""광고 마커 감지 — '이 서브트리는 스폰서 콘텐츠'임을 알리는 노드 탐색.

두 가지 전략 모두 후보 풀에 기여한다:
1. 텍스트 라벨: 정규화된 노드 텍스트가 스폰서 라벨("광고")과 정확히 일치
2. URL 패턴: 링크 대상 호스트가 광고 리다이렉트 도메인(adcr.naver.com 등)과 일치

마커가 없으면 빈 리스트 — 광고 미노출은 정상 결과다.
"""

from __future__ import annotations

from loguru import logger

from processor.card_config import AdMarkerPattern
from processor.document_model import DocumentTree, PositionedNode


def is_label_marker(node: PositionedNode, pattern: AdMarkerPattern) -> bool:
    return pattern.is_label(node.text)


def is_link_marker(node: PositionedNode, pattern: AdMarkerPattern) -> bool:
    return node.is_link and pattern.is_sponsor_href(node.href)


def find_markers(tree: DocumentTree, pattern: AdMarkerPattern) -> list[PositionedNode]:
    """문서 순서대로 마커 노드 반환 (중복 없음)."""
    markers: list[PositionedNode] = []
    label_count = link_count = 0
    for node in tree.iter_nodes():
        if is_label_marker(node, pattern):
            label_count += 1
            markers.append(node)
        elif is_link_marker(node, pattern):
            link_count += 1
            markers.append(node)

    logger.debug(
        "[card_ad] markers: {} (text_label={}, url_pattern={})",
        len(markers), label_count, link_count,
    )
    return markers
