"""렌더링된 페이지 → 위치 노드 스냅샷.

page.evaluate 한 번으로 body 이하 요소를 순회하며 태그/자체 텍스트/좌표/링크/
이미지 속성을 JSON으로 뽑고, processor.document_model.build_document 로 트리화한다.
"""

from __future__ import annotations

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from processor.card_config import ExtractionConfig
from processor.document_model import DocumentBuildError, DocumentTree, build_document

# 자체 텍스트(직계 text node)만 text로 담는다 — innerText는 트리에서 재구성
SNAPSHOT_JS = """
() => {
    const SKIP = new Set(['SCRIPT', 'STYLE', 'NOSCRIPT', 'TEMPLATE', 'SVG', 'IFRAME']);
    const LAZY_ATTRS = ['data-src', 'data-lazy-src', 'data-original', 'data-lazysrc'];

    function ownText(el) {
        let t = '';
        for (const n of el.childNodes) {
            if (n.nodeType === Node.TEXT_NODE) t += n.textContent + ' ';
        }
        return t.trim();
    }

    function walk(el) {
        if (SKIP.has(el.tagName.toUpperCase())) return null;
        const style = window.getComputedStyle(el);
        if (style.display === 'none' || style.visibility === 'hidden') return null;
        const r = el.getBoundingClientRect();
        const node = {
            tag: el.tagName.toLowerCase(),
            role: el.getAttribute('role'),
            text: ownText(el),
            x: r.left + window.scrollX,
            y: r.top + window.scrollY,
            width: r.width,
            height: r.height,
            href: el.tagName === 'A' ? (el.href || null) : null,
            src: null,
            lazySrc: null,
            children: [],
        };
        if (el.tagName === 'IMG') {
            node.src = el.currentSrc || el.getAttribute('src') || null;
            for (const a of LAZY_ATTRS) {
                const v = el.getAttribute(a);
                if (v) { node.lazySrc = v; break; }
            }
        }
        for (const child of el.children) {
            const c = walk(child);
            if (c) node.children.push(c);
        }
        return node;
    }

    return document.body ? walk(document.body) : null;
}
"""


async def capture_document(page: Page, config: ExtractionConfig | None = None) -> DocumentTree:
    """페이지 스냅샷을 떠서 DocumentTree 반환.

    Raises:
        DocumentBuildError: 페이지가 닫혔거나 body가 없는 등 스냅샷 실패
    """
    try:
        if page.is_closed():
            raise DocumentBuildError("page is closed")
        snapshot = await page.evaluate(SNAPSHOT_JS)
        page_url = page.url
    except PlaywrightError as e:
        raise DocumentBuildError(f"page snapshot failed: {e}") from e

    if not snapshot:
        raise DocumentBuildError("page has no body")

    tree = build_document(snapshot, page_url=page_url, config=config)
    logger.debug("[card_ad] document snapshot: {} nodes ({})", len(tree), page_url)
    return tree
