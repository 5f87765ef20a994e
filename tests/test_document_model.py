"""문서 모델(스냅샷 → 위치 노드 트리) 단위 테스트."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent))

import pytest

from card_fixtures import el, find_node, scenario_page
from processor.document_model import (
    BoundingBox,
    DocumentBuildError,
    build_document,
    collapse_whitespace,
)


def test_build_scenario_tree():
    tree = build_document(scenario_page(), page_url="https://search.naver.com/search.naver?query=x")
    assert tree.root.tag == "body"
    assert tree.page_url.startswith("https://search.naver.com")
    card = find_node(tree, "div", 100)
    assert [c.tag for c in card.children] == ["span", "strong", "a", "img", "span", "span", "a"]
    assert "BrandCo" in card.full_text
    assert "Free Consultation" in card.full_text


def test_parent_ancestors_and_order():
    tree = build_document(scenario_page())
    card = find_node(tree, "div", 100)
    label = card.children[0]
    assert tree.parent(label) is card
    chain = list(tree.ancestors(label))
    assert chain[0] is card
    assert chain[-1] is tree.root
    assert list(tree.ancestors(label, max_depth=1)) == [card]
    assert tree.order_of(card) < tree.order_of(label)
    assert tree.parent(tree.root) is None


def test_descendants_excludes_self():
    tree = build_document(scenario_page())
    card = find_node(tree, "div", 100)
    desc = list(tree.descendants(card))
    assert card not in desc
    assert len(desc) == 7


def test_text_whitespace_collapsed():
    snap = el("body", 0, 0, 800, 600, children=[
        el("span", 10, 10, 100, 20, "  무료\xa0\xa0상담\n 이벤트\u200b "),
    ])
    tree = build_document(snap)
    assert tree.root.children[0].text == "무료 상담 이벤트"


def test_small_wrapper_is_spliced_into_parent():
    # 40x20 래퍼는 구조 노드 하한(50x30) 미달 → 자식만 부모로 올라간다
    snap = el("body", 0, 0, 800, 600, children=[
        el("div", 10, 10, 40, 20, children=[
            el("span", 10, 10, 30, 16, "광고"),
        ]),
    ])
    tree = build_document(snap)
    assert [c.tag for c in tree.root.children] == ["span"]
    assert tree.parent(tree.root.children[0]) is tree.root


def test_zero_size_leaf_dropped():
    snap = el("body", 0, 0, 800, 600, children=[
        el("span", 0, 0, 0, 0, "hidden"),
        el("span", 10, 10, 30, 16, "shown"),
    ])
    tree = build_document(snap)
    assert [c.text for c in tree.root.children] == ["shown"]


def test_small_leaf_kept():
    # 칩/라벨 같은 작은 리프는 양수 크기면 유지
    snap = el("body", 0, 0, 800, 600, children=[el("em", 5, 5, 20, 12, "AD")])
    tree = build_document(snap)
    assert tree.root.children[0].text == "AD"


def test_small_image_leaf_dropped():
    snap = el("body", 0, 0, 800, 600, children=[
        el("img", 0, 0, 1, 1, src="https://pixel.example.com/t.gif"),
        el("img", 0, 10, 40, 20, lazySrc="https://img/icon.png"),
        el("img", 0, 50, 60, 40, src="https://img/thumb.jpg"),
    ])
    tree = build_document(snap)
    assert [c.image_src for c in tree.root.children] == ["https://img/thumb.jpg"]


def test_image_and_link_attributes():
    snap = el("body", 0, 0, 800, 600, children=[
        el("a", 0, 0, 200, 40, "go", href=" https://adcr.naver.com/x "),
        el("img", 0, 50, 100, 100, src="data:image/gif;base64,AAAA", lazySrc="https://img/x.jpg"),
    ])
    tree = build_document(snap)
    link, img = tree.root.children
    assert link.is_link and link.is_interactive
    assert link.href == "https://adcr.naver.com/x"
    assert img.is_image
    assert img.lazy_image_src == "https://img/x.jpg"


def test_role_button_is_interactive():
    snap = el("body", 0, 0, 800, 600, children=[el("div", 0, 0, 100, 40, "예약", role="button")])
    tree = build_document(snap)
    assert tree.root.children[0].is_interactive


@pytest.mark.parametrize("bad", [None, "not a page", 42, ["body"]])
def test_invalid_snapshot_raises(bad):
    with pytest.raises(DocumentBuildError):
        build_document(bad)


def test_invalid_geometry_raises():
    snap = el("body", 0, 0, 800, 600, children=[el("span", "left", 0, 10, 10, "x")])
    with pytest.raises(DocumentBuildError):
        build_document(snap)


def test_invalid_children_raises():
    snap = el("body", 0, 0, 800, 600)
    snap["children"] = "oops"
    with pytest.raises(DocumentBuildError):
        build_document(snap)


def test_bounding_box_contains_with_tolerance():
    outer = BoundingBox(100, 100, 300, 200)
    assert outer.contains(BoundingBox(110, 110, 50, 50))
    assert not outer.contains(BoundingBox(99, 100, 50, 50))
    assert outer.contains(BoundingBox(99, 100, 50, 50), tolerance=2)
    assert outer.area == 60000
    assert outer.bottom == 300


def test_collapse_whitespace_empty():
    assert collapse_whitespace(None) == ""
    assert collapse_whitespace("   ") == ""
