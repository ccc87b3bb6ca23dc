import uuid

import pytest

from linkforge.models.link import Link
from linkforge.models.profile import Profile
from linkforge.models.visit import Visit


pytestmark = pytest.mark.asyncio


async def _page_with_links(create_user):
    owner, _ = await create_user(name="Ada", bio="Engines")
    profile = await Profile.get(user_id=owner.id)
    shown = await Link.create(profile_id=profile.id, title="Shown", url="https://shown.example/", order=1)
    first = await Link.create(profile_id=profile.id, title="First", url="https://first.example/", order=0)
    hidden = await Link.create(
        profile_id=profile.id, title="Hidden", url="https://hidden.example/", order=2, is_active=False
    )
    return owner, profile, (first, shown, hidden)


async def test_public_page_shows_active_links_in_order(client, create_user):
    owner, _, _ = await _page_with_links(create_user)

    resp = await client.get(f"/api/v1/public/{owner.username}")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Ada"
    assert data["design"]["buttonColor"] == "#865DFF"
    assert [l["title"] for l in data["links"]] == ["First", "Shown"]
    assert "clickCount" not in data["links"][0]


async def test_unknown_or_private_page_is_404(client, create_user):
    resp = await client.get("/api/v1/public/nobody_here")
    assert resp.status_code == 404

    owner, _ = await create_user()
    await Profile.filter(user_id=owner.id).update(is_public=False)
    resp = await client.get(f"/api/v1/public/{owner.username}")
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "PROFILE_NOT_FOUND"

    visit = await client.post(f"/api/v1/public/{owner.username}/visit")
    assert visit.status_code == 404


async def test_visit_sets_cookie_and_counts_unique_once(client, create_user):
    owner, _ = await create_user()
    url = f"/api/v1/public/{owner.username}/visit"

    first = await client.post(url, headers={"x-forwarded-for": "198.51.100.4, 10.0.0.1"})
    assert first.status_code == 200
    body = first.json()["data"]
    assert body["isNewVisitor"] is True
    visitor_id = body["visitorId"]

    set_cookie = first.headers["set-cookie"]
    assert f"visitor_id={visitor_id}" in set_cookie
    assert "Max-Age=31536000" in set_cookie

    # The client jar now carries the cookie
    again = await client.post(url)
    assert again.json()["data"] == {"visitorId": visitor_id, "isNewVisitor": False}

    profile = await Profile.get(user_id=owner.id)
    assert (profile.view_count, profile.unique_visitors) == (2, 1)
    ips = await Visit.filter(user_id=owner.id).values_list("ip", flat=True)
    assert "198.51.100.4" in ips


async def test_visitor_id_from_body_when_cookies_are_blocked(client, create_user):
    owner, _ = await create_user()
    url = f"/api/v1/public/{owner.username}/visit"

    first = await client.post(url)
    visitor_id = first.json()["data"]["visitorId"]
    client.cookies.clear()

    again = await client.post(url, json={"visitorId": visitor_id})
    assert again.json()["data"]["isNewVisitor"] is False

    client.cookies.clear()
    stranger = await client.post(url)
    assert stranger.json()["data"]["isNewVisitor"] is True

    profile = await Profile.get(user_id=owner.id)
    assert (profile.view_count, profile.unique_visitors) == (3, 2)


async def test_click_counting(client, create_user):
    _, _, (first, shown, hidden) = await _page_with_links(create_user)

    for _ in range(2):
        resp = await client.post(f"/api/v1/public/links/{first.id}/click")
        assert resp.status_code == 200

    await first.refresh_from_db()
    assert first.click_count == 2

    resp = await client.post(f"/api/v1/public/links/{hidden.id}/click")
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "LINK_NOT_FOUND"

    resp = await client.post(f"/api/v1/public/links/{uuid.uuid4()}/click")
    assert resp.status_code == 404


@pytest.mark.parametrize("forwarded", ["x" * 100, "not-an-ip, 198.51.100.4", ""])
async def test_junk_forwarded_header_falls_back_to_peer_address(client, create_user, forwarded):
    owner, _ = await create_user()

    resp = await client.post(f"/api/v1/public/{owner.username}/visit", headers={"x-forwarded-for": forwarded})
    assert resp.status_code == 200

    profile = await Profile.get(user_id=owner.id)
    assert profile.view_count == 1
    ips = await Visit.filter(user_id=owner.id).values_list("ip", flat=True)
    assert ips == ["127.0.0.1"]
