from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from pagecheck.config import CheckOptions, merge_options
from pagecheck.engine.result import CheckResult
from pagecheck.engine.selectors import all_matches, first_match

LOGGER = logging.getLogger("pagecheck")

Options = Union[CheckOptions, Mapping[str, Any], None]

DEFAULT_VIEWPORT = {"width": 1024, "height": 768}

TITLE_SELECTOR = "h1, h2, h3, h4, h5, .title"
TEXT_SELECTOR = "p, span, .desc, .info"

NEXT_BUTTON_SELECTORS = [
    'button[aria-label="avanti"]',
    'button[aria-label="next"]',
    'button:has-text("Avanti")',
]
PREV_BUTTON_SELECTORS = [
    'button[aria-label="indietro"]',
    'button[aria-label="prev"]',
    'button:has-text("Indietro")',
]
SLIDER_SELECTOR = 'input[type="range"]'
GENDER_RADIO_SELECTOR = '[type="radio"][name="gender"]'
NATIONALITY_CHECKBOX_SELECTOR = '[type="checkbox"][name="nationality"]'

INTERNAL_ANCHOR_SELECTOR = 'a[href^="#"]'
CHART_BAR_SELECTOR = '[class*="bar"], [class*="day"], div[data-progress]'

ROBOT_CHECKBOX_SELECTORS = [
    'input[type="checkbox"][aria-label*="robot"]',
    'label:has-text("non sono un robot")',
]
CAPTCHA_FRAME_SELECTORS = [
    'iframe[src*="recaptcha"]',
    'iframe[src*="hcaptcha"]',
]

COMPUTED_STYLE_JS = "(el, prop) => window.getComputedStyle(el)[prop] || ''"


async def ensure_page(page: Any, url: str) -> None:
    current = page.url
    if not current or current == "about:blank":
        LOGGER.debug("Navigating to %s", url)
        await page.goto(url)


async def _prepare(page: Any, options: Options) -> CheckOptions:
    opts = merge_options(options)
    await ensure_page(page, opts.url)
    return opts


def id_selector(element_id: str) -> str:
    escaped = element_id.replace("\\", "\\\\").replace('"', '\\"')
    return f'[id="{escaped}"]'


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


async def _computed_style(element: Any, prop: str) -> str:
    value = await element.evaluate(COMPUTED_STYLE_JS, prop)
    return str(value or "")


async def check_user_cards(page: Any, options: Options = None) -> CheckResult:
    opts = await _prepare(page, options)
    cards = await all_matches(page, opts.selector("userCard"))
    if not cards:
        return CheckResult(ok=False, message="No user cards found", details={"count": 0})

    name_sel = opts.selector("userName")
    email_sel = opts.selector("userEmail")
    nationality_sel = opts.selector("userNationality")
    for index, card in enumerate(cards):
        name = await first_match(card, name_sel)
        email = await first_match(card, email_sel)
        nationality = await first_match(card, nationality_sel)
        if not name or not email or not nationality:
            return CheckResult(
                ok=False,
                message=f"Card {index} is missing required fields",
                details={
                    "index": index,
                    "name": bool(name),
                    "email": bool(email),
                    "nationality": bool(nationality),
                },
            )
    return CheckResult(ok=True, message="User cards OK", details={"count": len(cards)})


async def check_refresh_centers(page: Any, options: Options = None) -> CheckResult:
    opts = await _prepare(page, options)
    refresh = await first_match(page, opts.selector("refresh"))
    if refresh:
        await refresh.click()

    card = await first_match(page, opts.selector("userCard"))
    if not card:
        return CheckResult(ok=False, message="No card found after refresh")
    box = await card.bounding_box()
    if not box:
        return CheckResult(ok=False, message="Could not read the card bounding box")

    viewport = page.viewport_size or DEFAULT_VIEWPORT
    center_x = box["x"] + box["width"] / 2
    center_y = box["y"] + box["height"] / 2
    delta_x = abs(center_x - viewport["width"] / 2)
    delta_y = abs(center_y - viewport["height"] / 2)
    tolerance = opts.center_tolerance
    ok = delta_x < viewport["width"] * tolerance and delta_y < viewport["height"] * tolerance
    return CheckResult(
        ok=ok,
        message="Card is centered" if ok else "Card is not centered",
        details={"delta_x": delta_x, "delta_y": delta_y, "viewport": dict(viewport)},
    )


async def check_readable_info(page: Any, options: Options = None) -> CheckResult:
    opts = await _prepare(page, options)
    cards = await all_matches(page, opts.selector("userCard"))
    if not cards:
        return CheckResult(ok=False, message="No cards to check for readability")

    for index, card in enumerate(cards):
        has_title = await card.query_selector(TITLE_SELECTOR) is not None
        has_text = await card.query_selector(TEXT_SELECTOR) is not None
        if not has_title or not has_text:
            return CheckResult(
                ok=False,
                message=f"Card {index} has no title or descriptive text",
                details={"index": index, "has_title": has_title, "has_text": has_text},
            )
    return CheckResult(ok=True, message="Cards carry readable information")


async def check_advanced_search_controls(page: Any, options: Options = None) -> CheckResult:
    await _prepare(page, options)
    next_button = await first_match(page, NEXT_BUTTON_SELECTORS)
    prev_button = await first_match(page, PREV_BUTTON_SELECTORS)
    slider = await page.query_selector(SLIDER_SELECTOR)
    radios = await page.query_selector_all(GENDER_RADIO_SELECTOR)
    checkboxes = await page.query_selector_all(NATIONALITY_CHECKBOX_SELECTOR)

    ok = (
        bool(next_button or prev_button)
        and bool(slider)
        and len(radios) >= 2
        and len(checkboxes) >= 1
    )
    return CheckResult(
        ok=ok,
        message="Search controls present" if ok else "Search controls missing or insufficient",
        details={
            "next": bool(next_button),
            "prev": bool(prev_button),
            "slider": bool(slider),
            "radios": len(radios),
            "checkboxes": len(checkboxes),
        },
    )


async def check_navbar_photos(page: Any, options: Options = None) -> CheckResult:
    opts = await _prepare(page, options)
    nav_item = await first_match(page, opts.selector("navbarSecondItem"))
    if not nav_item:
        return CheckResult(ok=False, message="Second navbar item not found")
    await nav_item.click()

    images = await all_matches(page, opts.selector("userPhotoImg"))
    if not images:
        return CheckResult(ok=False, message="No user photos found")

    first = images[0]
    initial_opacity = await _computed_style(first, "opacity")
    await page.wait_for_timeout(opts.settle_delay_ms)
    later_opacity = await _computed_style(first, "opacity")
    transition = await _computed_style(first, "transition")

    initial = _as_float(initial_opacity)
    later = _as_float(later_opacity)
    fading_in = initial is not None and later is not None and later >= initial
    ok = fading_in or len(transition.strip()) > 0
    return CheckResult(
        ok=ok,
        message="Photos fade in progressively" if ok else "No progressive photo effect detected",
        details={
            "initial_opacity": initial_opacity,
            "later_opacity": later_opacity,
            "transition": transition,
        },
    )


async def check_documentation_anchors(page: Any, options: Options = None) -> CheckResult:
    opts = await _prepare(page, options)
    docs = await first_match(page, opts.selector("documentation"))
    if not docs:
        return CheckResult(ok=False, message="Documentation section not found")

    anchors = await docs.query_selector_all(INTERNAL_ANCHOR_SELECTOR)
    if not anchors:
        return CheckResult(
            ok=False,
            message="No internal anchors in the documentation section",
            details={"anchors": 0},
        )

    for anchor in anchors:
        href = await anchor.get_attribute("href") or ""
        if not href.startswith("#"):
            continue
        target_id = href[1:]
        # A bare "#" points at the top of the page.
        if not target_id:
            continue
        target = await page.query_selector(id_selector(target_id))
        if not target:
            return CheckResult(
                ok=False,
                message=f"Anchor points to a missing id: {target_id}",
                details={"missing_id": target_id, "anchors": len(anchors)},
            )
    return CheckResult(
        ok=True,
        message="Documentation anchors are valid",
        details={"anchors": len(anchors)},
    )


async def check_versions_nav(page: Any, options: Options = None) -> CheckResult:
    opts = await _prepare(page, options)
    entry = await first_match(page, opts.selector("versionsNav"))
    ok = entry is not None
    return CheckResult(ok=ok, message="Versions entry present" if ok else "Versions entry missing")


async def check_access_chart(page: Any, options: Options = None) -> CheckResult:
    opts = await _prepare(page, options)
    chart = await first_match(page, opts.selector("accessChart"))
    if not chart:
        return CheckResult(ok=False, message="Access chart not found")

    bars = await chart.query_selector_all(CHART_BAR_SELECTOR)
    ok = len(bars) > 0
    return CheckResult(
        ok=ok,
        message="Chart has progressive elements" if ok else "Chart has no progressive elements",
        details={"bars": len(bars)},
    )


async def check_donate_anti_bot(page: Any, options: Options = None) -> CheckResult:
    opts = await _prepare(page, options)
    donate = await first_match(page, opts.selector("donateSection"))
    if not donate:
        return CheckResult(ok=False, message="Donate section not found")

    robot_checkbox = await first_match(donate, ROBOT_CHECKBOX_SELECTORS)
    captcha_frame = await first_match(donate, CAPTCHA_FRAME_SELECTORS)
    ok = bool(robot_checkbox) or bool(captcha_frame)
    return CheckResult(
        ok=ok,
        message="Anti-bot control present" if ok else "Anti-bot control not found",
        details={"robot_checkbox": bool(robot_checkbox), "captcha_frame": bool(captcha_frame)},
    )
