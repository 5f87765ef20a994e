"""카드 컨테이너 → 필드 분해 테스트."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from card_fixtures import el, find_node, scenario_page
from processor.card_config import DEFAULT_EXTRACTION_CONFIG as CFG
from processor.document_model import build_document
from processor.field_extractor import build_lines, extract_fields


def _extract(card_snapshot):
    snap = el("body", 0, 0, 1280, 2000, children=[card_snapshot])
    tree = build_document(snap)
    card = tree.root.children[0]
    return extract_fields(tree, card, CFG)


def test_scenario_fields():
    tree = build_document(scenario_page())
    card = find_node(tree, "div", 100)
    raw = extract_fields(tree, card, CFG)
    assert raw.advertiser == "BrandCo"
    assert raw.headline == "Enroll Now — Spring Session"
    assert raw.schedule == "3/15(Fri)"
    assert raw.tags == ["Gangnam"]
    assert raw.badges == ["Free Consultation"]
    assert raw.image == "https://img.example.com/card.jpg"
    assert raw.link == "https://adcr.naver.com/adcr?x=card1"


def test_lines_ordered_top_to_bottom_then_left_to_right_and_deduped():
    card = el("div", 0, 0, 600, 300, children=[
        el("span", 300, 50, 80, 20, "오른쪽"),
        el("span", 10, 50, 80, 20, "왼쪽"),
        el("span", 10, 10, 80, 20, "맨위"),
        el("span", 10, 90, 80, 20, "왼쪽"),
    ])
    tree = build_document(el("body", 0, 0, 800, 800, children=[card]))
    lines = build_lines(tree, tree.root.children[0], CFG)
    assert [l.text for l in lines] == ["맨위", "왼쪽", "오른쪽"]


def test_korean_card():
    raw = _extract(el("div", 100, 200, 680, 320, children=[
        el("span", 740, 205, 28, 16, "광고"),
        el("a", 110, 210, 120, 22, "에듀윌 편입", href="https://adcr.naver.com/adcr?k=1"),
        el("strong", 110, 240, 520, 28, "편입 합격 1위 에듀윌, 2027 대비 설명회 접수 시작", href=None),
        el("img", 600, 240, 160, 110, src="https://searchad-phinf.pstatic.net/card.jpg"),
        el("span", 110, 330, 160, 20, "1/22(목) 19:00"),
        el("span", 110, 360, 40, 20, "강남"),
        el("span", 160, 360, 40, 20, "편입"),
        el("span", 210, 360, 40, 20, "50%"),
        el("a", 110, 420, 180, 40, "무료 상담 예약 바로가기", href="https://adcr.naver.com/adcr?k=2"),
        el("a", 300, 420, 180, 40, "합격 시 수강료 100% 환급", href="https://adcr.naver.com/adcr?k=3"),
        el("a", 490, 420, 180, 40, "새소식", href="https://adcr.naver.com/adcr?k=4"),
    ]))
    assert raw.headline == "편입 합격 1위 에듀윌, 2027 대비 설명회 접수 시작"
    assert raw.advertiser == "에듀윌 편입"
    assert raw.schedule == "1/22(목) 19:00"
    assert raw.tags == ["강남", "편입"]
    assert raw.badges == ["무료 상담 예약 바로가기", "합격 시 수강료 100% 환급"]
    assert raw.link == "https://adcr.naver.com/adcr?k=1"


def test_advertiser_never_equals_headline():
    # 상단 구역에 라인이 하나뿐이면 헤드라인으로 쓰이고 광고주는 비어 있다
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("span", 500, 5, 24, 16, "광고"),
        el("strong", 10, 10, 300, 24, "브랜드 한 줄 광고 문구"),
        el("img", 10, 150, 100, 100, src="https://img/x.jpg"),
    ]))
    assert raw.headline == "브랜드 한 줄 광고 문구"
    assert raw.advertiser is None


def test_advertiser_must_be_in_top_zone():
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("strong", 10, 10, 400, 24, "이번 시즌 최대 혜택 안내 문구"),
        el("span", 10, 250, 60, 20, "하단브랜드"),
    ]))
    assert raw.advertiser is None


def test_headline_length_bounds_and_date_exclusion():
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("span", 10, 10, 100, 20, "짧음"),
        el("span", 10, 40, 500, 20, "12/25(수) 크리스마스 특별 설명회 안내"),
        el("span", 10, 70, 500, 20, "가" * 81),
        el("span", 10, 100, 300, 20, "여섯글자이상"),
    ]))
    assert raw.headline == "여섯글자이상"


def test_headline_tie_first_occurrence_wins():
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("span", 10, 10, 200, 20, "첫번째헤드라인"),
        el("span", 10, 40, 200, 20, "두번째헤드라인"),
    ]))
    assert raw.headline == "첫번째헤드라인"


def test_schedule_korean_month_day():
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("span", 10, 10, 200, 20, "에듀윌"),
        el("span", 10, 200, 200, 20, "3월 5일 개강"),
    ]))
    assert raw.schedule == "3월 5일 개강"


def test_schedule_keyword_fallback():
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("span", 10, 10, 400, 20, "편입 전문 학원 봄학기 안내 페이지"),
        el("span", 10, 200, 200, 20, "설명회 접수중"),
    ]))
    assert raw.schedule == "설명회 접수중"


def test_no_schedule():
    raw = _extract(el("div", 0, 0, 600, 300, children=[el("span", 10, 10, 200, 20, "아무 일정 없음")]))
    assert raw.schedule is None


def test_tags_capped_and_numeric_filtered():
    children = [el("span", 10, 10 + i * 25, 60, 20, f"태그{i:02d}") for i in range(20)]
    children += [el("span", 100, 10, 40, 20, "1,000"), el("span", 150, 10, 40, 20, "30%")]
    raw = _extract(el("div", 0, 0, 600, 600, children=children))
    assert len(raw.tags) == CFG.tag_cap == 12
    assert "1,000" not in raw.tags and "30%" not in raw.tags
    assert raw.advertiser not in raw.tags


def test_badges_capped_and_zone_restricted():
    children = [el("span", 10, 10, 200, 20, "무료 체험 이벤트 상단")]
    children += [el("span", 10, 300 + i * 25, 200, 20, f"무료 상담 이벤트 {i:02d}") for i in range(15)]
    raw = _extract(el("div", 0, 0, 600, 700, children=children))
    assert len(raw.badges) == CFG.badge_cap == 8
    assert "무료 체험 이벤트 상단" not in raw.badges


def test_image_skips_inline_and_uses_lazy_source():
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("img", 10, 10, 100, 100, src="data:image/gif;base64,R0lGOD"),
        el("img", 120, 10, 100, 100, src="data:image/png;base64,AAAA", lazySrc="https://img/lazy.jpg"),
        el("img", 230, 10, 100, 100, src="https://img/late.jpg"),
    ]))
    assert raw.image == "https://img/lazy.jpg"


def test_link_falls_back_to_first_navigable_link():
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("a", 10, 10, 100, 20, "열기", href="#"),
        el("a", 10, 40, 100, 20, "스크립트", href="javascript:void(0)"),
        el("a", 10, 70, 100, 20, "홈페이지", href="https://brand.example.com/"),
        el("a", 10, 100, 100, 20, "다른곳", href="https://other.example.com/"),
    ]))
    assert raw.link == "https://brand.example.com/"


def test_nodes_outside_container_box_ignored():
    raw = _extract(el("div", 0, 0, 600, 300, children=[
        el("span", 10, 10, 100, 20, "안쪽브랜드"),
        el("span", 10, 900, 100, 20, "바깥태그"),
        el("img", 10, 900, 100, 100, src="https://img/outside.jpg"),
    ]))
    assert "바깥태그" not in raw.tags
    assert raw.image is None


def test_empty_container_yields_empty_card():
    raw = _extract(el("div", 0, 0, 600, 300, children=[el("img", 0, 0, 100, 100)]))
    assert raw.advertiser is None and raw.headline is None and raw.schedule is None
    assert raw.tags == [] and raw.badges == []
    assert raw.image is None and raw.link is None
