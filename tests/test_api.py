"""End-to-end tests through the HTTP API."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from apparel_api.app.core.security import session_store


SWEATER = {
    "category": "Tops",
    "brand": "Uniqlo",
    "rating": 5,
    "styles": ["preppy"],
    "material": {"materials": ["wool"], "weights": {"wool": 1.0}},
    "size": {"kind": "letter", "value": "M"},
    "description": "Merino crewneck",
}
JEANS = {
    "category": "Bottoms",
    "brand": "Levi's",
    "rating": 3,
    "styles": ["workwear"],
    "size": {"kind": "paired", "first": 32, "second": 34},
}


def register(client, username: str = "ada", password: str = "secret"):
    return client.post("/register", json={"username": username, "password": password})


def post_item(client, item: dict, user: str = "ada", **kwargs):
    return client.post(f"/post/item/{user}", data={"data": json.dumps(item)}, **kwargs)


def test_register_sets_session_cookie(client) -> None:
    response = register(client)

    assert response.status_code == 201
    assert response.json() == {"success": True, "username": "ada"}
    assert "login" in response.cookies
    assert client.get("/user/ada").json()["items"] == []


def test_register_duplicate_username(client) -> None:
    register(client)
    response = register(client, password="other")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "duplicate_user"


def test_login(client) -> None:
    register(client)
    client.cookies.clear()

    bad = client.post("/login", json={"username": "ada", "password": "wrong"})
    assert bad.status_code == 401
    assert bad.json()["error"]["code"] == "invalid_credentials"
    assert client.get("/get/items/ada").status_code == 401

    good = client.post("/login", json={"username": "ada", "password": "secret"})
    assert good.status_code == 200
    assert client.get("/get/items/ada").status_code == 200


def test_missing_or_forged_cookie_is_rejected(client) -> None:
    register(client)
    client.cookies.clear()

    assert client.get("/get/items/ada").json()["error"]["code"] == "session_expired"
    client.cookies.set("login", "not-a-cookie")
    assert client.get("/get/items/ada").status_code == 401


def test_other_users_wardrobe_is_forbidden(client) -> None:
    register(client, "grace")
    register(client, "ada")

    response = client.get("/get/items/grace")
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"
    assert post_item(client, SWEATER, user="grace").status_code == 403


def test_post_item_with_image(client, public_dir: Path) -> None:
    register(client)
    response = post_item(client, SWEATER, files={"image": ("sweater.JPG", b"\xff\xd8jpeg", "image/jpeg")})

    assert response.status_code == 201
    item = response.json()
    assert item["brand"] == "Uniqlo"
    assert item["picture"].endswith(".jpg")
    assert (public_dir / "img" / "user-data" / item["picture"]).read_bytes() == b"\xff\xd8jpeg"

    listed = client.get("/get/items/ada").json()
    assert [i["id"] for i in listed] == [item["id"]]
    assert client.get(f"/get/oneitem/{item['id']}").json()["size"] == {"kind": "letter", "value": "M"}
    assert client.get("/user/ada").json()["items"] == [item["id"]]


def test_post_item_rejects_invalid_data(client) -> None:
    register(client)

    assert post_item(client, {"rating": 11}).status_code == 422
    assert post_item(client, {"size": {"kind": "letter", "value": "MM"}}).status_code == 422
    assert client.get("/get/items/ada").json() == []


def test_get_one_item(client) -> None:
    register(client, "grace")
    item_id = post_item(client, JEANS, user="grace").json()["id"]
    register(client, "ada")

    assert client.get(f"/get/oneitem/{item_id}").status_code == 403
    missing = client.get(f"/get/oneitem/{item_id + 100}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "not_found"


def test_field_filter(client) -> None:
    register(client)
    sweater_id = post_item(client, SWEATER).json()["id"]
    jeans_id = post_item(client, JEANS).json()["id"]

    def search(field: str, keyword: str):
        response = client.post("/search/field", json={"username": "ada", "field": field, "keyword": keyword})
        assert response.status_code == 200
        return [item["id"] for item in response.json()]

    assert search("rating", "5") == [sweater_id]
    assert search("Material", "WOOL") == [sweater_id]
    assert search("size", "34") == [jeans_id]
    assert search("Brand", "levi") == [jeans_id]
    assert search("colour", "navy") == []


def test_broad_search(client) -> None:
    register(client)
    post_item(client, SWEATER)
    post_item(client, JEANS)

    hits = client.get("/search/all/ada/workwear").json()
    assert [item["brand"] for item in hits] == ["Levi's"]
    assert client.get("/search/all/ada/merino").json()[0]["brand"] == "Uniqlo"
    assert client.get("/search/all/ada/sequins").json() == []


def test_outfits(client) -> None:
    register(client)
    item_id = post_item(client, SWEATER).json()["id"]

    def post_outfit(outfit: dict):
        return client.post("/post/outfit/ada", data={"data": json.dumps(outfit)})

    created = post_outfit({"name": "Brunch", "items": [item_id]})
    assert created.status_code == 201
    assert post_outfit({"name": "Ghost", "items": [item_id + 100]}).status_code == 404

    outfits = client.get("/get/outfits/ada").json()
    assert [o["name"] for o in outfits] == ["Brunch"]
    assert client.get("/user/ada").json()["outfits"] == [created.json()["id"]]


def test_profile_updates(client) -> None:
    register(client)

    gender = client.post("/user/gender", json={"username": "ada", "gender": "female"})
    assert gender.status_code == 200
    assert gender.json()["gender"] == "female"

    details = client.post(
        "/user/details/ada",
        data={"full_name": "Ada Lovelace"},
        files={"image": ("me.png", b"png", "image/png")},
    )
    assert details.status_code == 200
    body = details.json()
    assert body["full_name"] == "Ada Lovelace"
    assert body["picture"].endswith(".png")
    assert "hash" not in body and "salt" not in body

    assert client.post("/user/gender", json={"username": "grace", "gender": "male"}).status_code == 403


def test_filenames(client) -> None:
    assert client.get("/filenames/img/icons").json() == ["shirt.svg", "shoe.svg"]
    assert client.get("/filenames/img/nothing").status_code == 404


def test_session_expires_after_inactivity(client, clock, monkeypatch) -> None:
    monkeypatch.setattr(session_store, "clock", clock)
    register(client)

    clock.advance(15)
    assert client.get("/get/items/ada").status_code == 200
    # The request above refreshed the session.
    clock.advance(15)
    assert client.get("/get/items/ada").status_code == 200

    clock.advance(25)
    expired = client.get("/get/items/ada")
    assert expired.status_code == 401
    assert expired.json()["error"]["code"] == "session_expired"

    assert client.post("/login", json={"username": "ada", "password": "secret"}).status_code == 200
    assert client.get("/get/items/ada").status_code == 200


def test_logout(client) -> None:
    register(client)
    cookie = client.cookies.get("login")

    assert client.post("/logout").status_code == 204
    client.cookies.set("login", cookie)
    assert client.get("/get/items/ada").status_code == 401


def test_healthz(client) -> None:
    register(client)

    assert client.get("/healthz").json() == {"status": "ok", "sessions": 1}


def test_session_is_validated_on_the_event_loop(client, monkeypatch) -> None:
    register(client)
    on_loop = []
    validate = session_store.validate

    def _recording_validate(username, key):
        try:
            asyncio.get_running_loop()
            on_loop.append(True)
        except RuntimeError:
            on_loop.append(False)
        return validate(username, key)

    monkeypatch.setattr(session_store, "validate", _recording_validate)

    assert client.get("/get/items/ada").status_code == 200
    assert on_loop == [True]


def test_upload_is_removed_when_the_record_is_rejected(client, public_dir: Path) -> None:
    register(client)
    media = public_dir / "img" / "user-data"

    response = client.post(
        "/post/outfit/ada",
        data={"data": json.dumps({"name": "Ghost", "items": [404]})},
        files={"image": ("ghost.png", b"png", "image/png")},
    )

    assert response.status_code == 404
    assert list(media.iterdir()) == []
    assert client.get("/get/outfits/ada").json() == []
