"""문서 모델 — 렌더링된 검색 결과 페이지를 위치 정보가 있는 노드 트리로 정규화.

페이지 스냅샷(JSON 형태 dict)을 한 번 받아 불변 트리로 만든다.
이후 모든 휴리스틱은 이 추상 트리 위에서만 동작하므로 렌더러/마크업이
바뀌어도 점수/추출 로직은 그대로 재사용된다.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import cached_property

from processor.card_config import DEFAULT_EXTRACTION_CONFIG, ExtractionConfig

# Zero-width characters
_ZWSP_RE = re.compile(r"[\u200B\u200C\u200D\u2060\uFEFF]")

_INTERACTIVE_TAGS = {"a", "button"}
_INTERACTIVE_ROLES = {"button", "link"}


class DocumentBuildError(Exception):
    """페이지 핸들이 유효하지 않거나 트리를 구성할 수 없음."""


def collapse_whitespace(text: str | None) -> str:
    """NBSP/zero-width 포함 모든 공백을 한 칸으로 접고 trim."""
    if not text:
        return ""
    return " ".join(_ZWSP_RE.sub("", text).split())


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, other: BoundingBox, tolerance: float = 0.0) -> bool:
        return (
            other.left >= self.left - tolerance
            and other.top >= self.top - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


@dataclass(frozen=True, eq=False)
class PositionedNode:
    """렌더링된 요소 하나의 불변 스냅샷. 동일성(identity) 기준으로 해시된다."""

    tag: str
    box: BoundingBox
    text: str = ""
    role: str | None = None
    href: str | None = None
    image_src: str | None = None
    lazy_image_src: str | None = None
    children: tuple[PositionedNode, ...] = ()

    @property
    def is_link(self) -> bool:
        return self.tag == "a" and bool(self.href)

    @property
    def is_interactive(self) -> bool:
        return self.tag in _INTERACTIVE_TAGS or (self.role or "") in _INTERACTIVE_ROLES

    @property
    def is_image(self) -> bool:
        return self.tag == "img" or bool(self.image_src or self.lazy_image_src)

    @cached_property
    def full_text(self) -> str:
        """자신 + 하위 노드 텍스트를 줄바꿈으로 연결 (innerText 근사)."""
        parts = [self.text] if self.text else []
        for child in self.children:
            t = child.full_text
            if t:
                parts.append(t)
        return "\n".join(parts)

    def iter_subtree(self) -> Iterator[PositionedNode]:
        """전위 순회 (자신 포함, 문서 순서)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class DocumentTree:
    """루트 노드 + 부모 링크 + 문서 순서 인덱스."""

    def __init__(self, root: PositionedNode, page_url: str | None = None):
        self.root = root
        self.page_url = page_url
        self._parent: dict[PositionedNode, PositionedNode] = {}
        self._order: dict[PositionedNode, int] = {}
        for idx, node in enumerate(root.iter_subtree()):
            self._order[node] = idx
            for child in node.children:
                self._parent[child] = node

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, node: object) -> bool:
        return node in self._order

    def iter_nodes(self) -> Iterator[PositionedNode]:
        return self.root.iter_subtree()

    def parent(self, node: PositionedNode) -> PositionedNode | None:
        return self._parent.get(node)

    def ancestors(self, node: PositionedNode, max_depth: int | None = None) -> Iterator[PositionedNode]:
        """부모 → 조부모 순으로 최대 max_depth 단계까지."""
        cur = self._parent.get(node)
        depth = 0
        while cur is not None and (max_depth is None or depth < max_depth):
            yield cur
            depth += 1
            cur = self._parent.get(cur)

    def descendants(self, node: PositionedNode) -> Iterator[PositionedNode]:
        it = node.iter_subtree()
        next(it)
        yield from it

    def order_of(self, node: PositionedNode) -> int:
        return self._order[node]


# ── 스냅샷 → 트리 ──

def _as_float(raw: Mapping, key: str) -> float:
    value = raw.get(key, 0)
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise DocumentBuildError(f"invalid geometry {key}={value!r}") from e


def _optional_str(raw: Mapping, key: str) -> str | None:
    value = raw.get(key)
    if not value:
        return None
    value = str(value).strip()
    return value or None


def _build_nodes(raw: Mapping, config: ExtractionConfig, is_root: bool = False) -> list[PositionedNode]:
    """raw 노드 하나를 변환. 가시성 하한 미달이면 자식들을 부모로 끌어올린다."""
    if not isinstance(raw, Mapping):
        raise DocumentBuildError(f"node must be a mapping, got {type(raw).__name__}")

    raw_children = raw.get("children") or []
    if not isinstance(raw_children, (list, tuple)):
        raise DocumentBuildError("children must be a list")

    children: list[PositionedNode] = []
    for raw_child in raw_children:
        children.extend(_build_nodes(raw_child, config))

    box = BoundingBox(
        x=_as_float(raw, "x"),
        y=_as_float(raw, "y"),
        width=_as_float(raw, "width"),
        height=_as_float(raw, "height"),
    )

    if not is_root:
        # 텍스트 리프(라벨/칩)만 하한 면제. 이미지는 트래킹 픽셀 제거를 위해 하한 적용
        is_image = str(raw.get("tag") or "").lower() == "img" or raw.get("src") or raw.get("lazySrc")
        if raw_children or is_image:
            visible = box.width >= config.min_node_width and box.height >= config.min_node_height
        else:
            visible = box.width > 0 and box.height > 0
        if not visible:
            return children

    node = PositionedNode(
        tag=str(raw.get("tag") or "").lower(),
        box=box,
        text=collapse_whitespace(raw.get("text")),
        role=_optional_str(raw, "role"),
        href=_optional_str(raw, "href"),
        image_src=_optional_str(raw, "src"),
        lazy_image_src=_optional_str(raw, "lazySrc"),
        children=tuple(children),
    )
    return [node]


def build_document(
    snapshot: Mapping | None,
    page_url: str | None = None,
    config: ExtractionConfig | None = None,
) -> DocumentTree:
    """페이지 스냅샷 dict로부터 DocumentTree 생성.

    Raises:
        DocumentBuildError: 스냅샷이 없거나 형식이 잘못된 경우
    """
    if snapshot is None:
        raise DocumentBuildError("empty page snapshot")
    if not isinstance(snapshot, Mapping):
        raise DocumentBuildError(f"snapshot must be a mapping, got {type(snapshot).__name__}")

    cfg = config or DEFAULT_EXTRACTION_CONFIG
    try:
        (root,) = _build_nodes(snapshot, cfg, is_root=True)
    except RecursionError as e:
        raise DocumentBuildError("snapshot tree too deep") from e
    return DocumentTree(root, page_url=page_url)
