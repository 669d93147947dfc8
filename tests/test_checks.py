from __future__ import annotations

import pytest

from fakes import FakeElement, FakePage, make_card
from pagecheck.config import ConfigError
from pagecheck.engine.checks import (
    CHART_BAR_SELECTOR,
    GENDER_RADIO_SELECTOR,
    INTERNAL_ANCHOR_SELECTOR,
    check_access_chart,
    check_advanced_search_controls,
    check_documentation_anchors,
    check_donate_anti_bot,
    check_navbar_photos,
    check_readable_info,
    check_refresh_centers,
    check_user_cards,
    check_versions_nav,
    ensure_page,
    id_selector,
)


@pytest.mark.asyncio
async def test_ensure_page_navigates_only_from_blank():
    page = FakePage()
    await ensure_page(page, "http://localhost:3000")
    await ensure_page(page, "http://localhost:3000")
    assert page.visits == ["http://localhost:3000"]


@pytest.mark.asyncio
async def test_ensure_page_keeps_loaded_page():
    page = FakePage(url="http://localhost:3000/search")
    await ensure_page(page, "http://localhost:3000")
    assert page.visits == []


@pytest.mark.asyncio
async def test_check_twice_only_navigates_once(randomuser_page):
    first = await check_user_cards(randomuser_page)
    second = await check_user_cards(randomuser_page)
    assert first.ok and second.ok
    assert randomuser_page.visits == ["http://localhost:3000"]


@pytest.mark.asyncio
async def test_user_cards_none_found():
    result = await check_user_cards(FakePage())
    assert result.ok is False
    assert result.details == {"count": 0}


@pytest.mark.asyncio
async def test_user_cards_counts_well_formed_cards():
    page = FakePage({".user-card": [make_card() for _ in range(4)]})
    result = await check_user_cards(page)
    assert result.ok is True
    assert result.details["count"] == 4


@pytest.mark.asyncio
async def test_user_cards_reports_incomplete_card():
    page = FakePage({".user-card": [make_card(), make_card(email=False)]})
    result = await check_user_cards(page)
    assert result.ok is False
    assert result.details["index"] == 1
    assert result.details["email"] is False
    assert "Card 1" in result.message


@pytest.mark.asyncio
async def test_refresh_center_centered_card(randomuser_page):
    result = await check_refresh_centers(randomuser_page)
    assert result.ok is True
    assert result.details["delta_x"] == 0
    assert result.details["delta_y"] == 0
    assert randomuser_page.elements["#refresh"][0].clicks == 1


@pytest.mark.asyncio
async def test_refresh_center_offset_card_fails():
    # Centre at x=812: 300px off, beyond 25% of 1024.
    box = {"x": 712, "y": 284, "width": 200, "height": 200}
    page = FakePage({".user-card": [make_card(box=box)]})
    result = await check_refresh_centers(page)
    assert result.ok is False
    assert result.details["delta_x"] == 300


@pytest.mark.asyncio
async def test_refresh_center_vertical_offset_fails():
    box = {"x": 412, "y": 520, "width": 200, "height": 200}
    page = FakePage({".user-card": [make_card(box=box)]})
    result = await check_refresh_centers(page)
    assert result.ok is False


@pytest.mark.asyncio
async def test_refresh_center_without_refresh_button_still_measures():
    box = {"x": 412, "y": 284, "width": 200, "height": 200}
    page = FakePage({".user-card": [make_card(box=box)]})
    result = await check_refresh_centers(page)
    assert result.ok is True


@pytest.mark.asyncio
async def test_refresh_center_unknown_viewport_uses_default():
    box = {"x": 412, "y": 284, "width": 200, "height": 200}
    page = FakePage({".user-card": [make_card(box=box)]}, viewport=None)
    result = await check_refresh_centers(page)
    assert result.ok is True
    assert result.details["viewport"] == {"width": 1024, "height": 768}


@pytest.mark.asyncio
async def test_refresh_center_missing_card_or_box():
    assert (await check_refresh_centers(FakePage())).ok is False
    page = FakePage({".user-card": [make_card(box=None)]})
    result = await check_refresh_centers(page)
    assert result.ok is False
    assert "bounding box" in result.message


@pytest.mark.asyncio
async def test_readable_info(randomuser_page):
    assert (await check_readable_info(randomuser_page)).ok is True

    page = FakePage({".user-card": [make_card(), make_card(title=False)]})
    result = await check_readable_info(page)
    assert result.ok is False
    assert result.details == {"index": 1, "has_title": False, "has_text": True}


@pytest.mark.asyncio
async def test_advanced_search_needs_two_gender_radios(randomuser_page):
    assert (await check_advanced_search_controls(randomuser_page)).ok is True

    randomuser_page.elements[GENDER_RADIO_SELECTOR] = [FakeElement()]
    result = await check_advanced_search_controls(randomuser_page)
    assert result.ok is False
    assert result.details["radios"] == 1


@pytest.mark.asyncio
async def test_advanced_search_accepts_prev_button_only(randomuser_page):
    del randomuser_page.elements['button[aria-label="next"]']
    randomuser_page.elements['button:has-text("Indietro")'] = [FakeElement()]
    result = await check_advanced_search_controls(randomuser_page)
    assert result.ok is True
    assert result.details["next"] is False
    assert result.details["prev"] is True


@pytest.mark.asyncio
async def test_navbar_photos_opacity_rises(randomuser_page):
    result = await check_navbar_photos(randomuser_page)
    assert result.ok is True
    assert result.details["initial_opacity"] == "0"
    assert result.details["later_opacity"] == "1"
    assert randomuser_page.timeouts == [500]
    assert randomuser_page.elements["nav a >> nth=1"][0].clicks == 1


@pytest.mark.asyncio
async def test_navbar_photos_transition_alone_passes():
    image = FakeElement(styles={"opacity": ["1", "0.5"], "transition": "opacity 1s"})
    page = FakePage({"nav a >> nth=1": [FakeElement()], ".user-photo img": [image]})
    result = await check_navbar_photos(page, {"settle_delay_ms": 10})
    assert result.ok is True
    assert page.timeouts == [10]


@pytest.mark.asyncio
async def test_navbar_photos_fading_out_without_transition_fails():
    image = FakeElement(styles={"opacity": ["1", "0.5"], "transition": ""})
    page = FakePage({"nav a >> nth=1": [FakeElement()], ".user-photo img": [image]})
    result = await check_navbar_photos(page)
    assert result.ok is False


@pytest.mark.asyncio
async def test_navbar_photos_missing_nav_or_images():
    result = await check_navbar_photos(FakePage())
    assert result.ok is False
    assert "navbar" in result.message

    result = await check_navbar_photos(FakePage({"nav a >> nth=1": [FakeElement()]}))
    assert result.ok is False
    assert "photos" in result.message


@pytest.mark.asyncio
async def test_documentation_anchor_to_missing_id(randomuser_page):
    docs = randomuser_page.elements["#documentation, .documentation"][0]
    docs.children[INTERNAL_ANCHOR_SELECTOR].append(FakeElement(attrs={"href": "#changelog"}))
    result = await check_documentation_anchors(randomuser_page)
    assert result.ok is False
    assert result.details["missing_id"] == "changelog"
    assert "changelog" in result.message


@pytest.mark.asyncio
async def test_documentation_without_anchors_differs_from_missing_section():
    no_section = await check_documentation_anchors(FakePage())
    no_anchors = await check_documentation_anchors(
        FakePage({"#documentation, .documentation": [FakeElement()]})
    )
    assert no_section.ok is False
    assert no_anchors.ok is False
    assert no_section.message != no_anchors.message
    assert no_anchors.details == {"anchors": 0}


@pytest.mark.asyncio
async def test_documentation_bare_hash_anchor_is_ignored():
    docs = FakeElement({INTERNAL_ANCHOR_SELECTOR: [FakeElement(attrs={"href": "#"})]})
    result = await check_documentation_anchors(FakePage({"#documentation, .documentation": [docs]}))
    assert result.ok is True
    assert result.details["anchors"] == 1


@pytest.mark.asyncio
async def test_versions_nav_tries_each_label(randomuser_page):
    assert (await check_versions_nav(randomuser_page)).ok is True

    page = FakePage({"nav >> text=versioni": [FakeElement()]})
    assert (await check_versions_nav(page)).ok is True
    assert (await check_versions_nav(FakePage())).ok is False


@pytest.mark.asyncio
async def test_access_chart(randomuser_page):
    result = await check_access_chart(randomuser_page)
    assert result.ok is True
    assert result.details["bars"] == 2

    empty_chart = FakePage({".access-chart, #access-chart": [FakeElement({CHART_BAR_SELECTOR: []})]})
    result = await check_access_chart(empty_chart)
    assert result.ok is False
    assert result.details["bars"] == 0

    assert (await check_access_chart(FakePage())).ok is False


@pytest.mark.asyncio
async def test_donate_anti_bot_variants(randomuser_page):
    result = await check_donate_anti_bot(randomuser_page)
    assert result.ok is True
    assert result.details == {"robot_checkbox": False, "captcha_frame": True}

    robot = FakeElement({'label:has-text("non sono un robot")': [FakeElement()]})
    result = await check_donate_anti_bot(FakePage({"#donate, .donate": [robot]}))
    assert result.details == {"robot_checkbox": True, "captcha_frame": False}
    assert result.ok is True

    result = await check_donate_anti_bot(FakePage({"#donate, .donate": [FakeElement()]}))
    assert result.ok is False
    assert (await check_donate_anti_bot(FakePage())).message == "Donate section not found"


@pytest.mark.asyncio
async def test_partial_selectors_replace_the_whole_map():
    page = FakePage({".card": [make_card()]})
    with pytest.raises(ConfigError, match="userName"):
        await check_user_cards(page, {"selectors": {"userCard": ".card"}})


@pytest.mark.asyncio
async def test_custom_selectors_are_used():
    selectors = {
        "userCard": ".card",
        "userName": ".user-name",
        "userEmail": ".user-email",
        "userNationality": ".user-nationality",
    }
    page = FakePage({".card": [make_card(), make_card()]})
    result = await check_user_cards(page, {"selectors": selectors, "url": "http://demo.local"})
    assert result.ok is True
    assert result.details["count"] == 2
    assert page.visits == ["http://demo.local"]


def test_id_selector_escapes_quotes_and_backslashes():
    assert id_selector("api") == '[id="api"]'
    assert id_selector('say"hi') == '[id="say\\"hi"]'
    assert id_selector("a\\b") == '[id="a\\\\b"]'


@pytest.mark.asyncio
async def test_documentation_anchor_with_quote_in_missing_id():
    docs = FakeElement({INTERNAL_ANCHOR_SELECTOR: [FakeElement(attrs={"href": '#say"hi'})]})
    page = FakePage({"#documentation, .documentation": [docs]})
    result = await check_documentation_anchors(page)
    assert result.ok is False
    assert result.details["missing_id"] == 'say"hi'


@pytest.mark.asyncio
async def test_documentation_anchor_with_quote_in_existing_id():
    docs = FakeElement({INTERNAL_ANCHOR_SELECTOR: [FakeElement(attrs={"href": '#say"hi'})]})
    page = FakePage({
        "#documentation, .documentation": [docs],
        '[id="say\\"hi"]': [FakeElement()],
    })
    result = await check_documentation_anchors(page)
    assert result.ok is True
