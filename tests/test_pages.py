"""Page endpoint tests."""

import json

from tests.factories import FOOTER_CONFIG, THEME, image, page_form


def stored_file(uploads, reference: str):
    return uploads.root / reference.rsplit("/", 1)[-1]


def test_create_page(client, auth_headers, uploads, create_template):
    template = create_template()
    response = client.post(
        "/api/page",
        headers=auth_headers,
        data=page_form(template["id"]),
        files={"custom_logo": image("logo.png"), "footer_logo": image("footer.png")},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["template_id"] == template["id"]
    assert data["user_id"] == auth_headers.user_id
    assert data["footer_toggle"] is True
    assert data["contents"] == []
    assert stored_file(uploads, data["custom_logo"]).exists()
    assert stored_file(uploads, data["footer_logo"]).exists()


def test_create_page_nested_fields_read_back_identical(client, auth_headers, create_page):
    page = create_page()
    response = client.get(f"/api/page/one/{page['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["theme"] == THEME
    assert response.json()["footer_config"] == FOOTER_CONFIG


def test_create_page_with_unknown_template_id(client, auth_headers):
    # Template ids are only checked for format
    response = client.post(
        "/api/page",
        headers=auth_headers,
        data=page_form("f" * 32),
        files={"custom_logo": image(), "footer_logo": image()},
    )
    assert response.status_code == 201


def test_create_page_missing_one_logo(client, auth_headers, uploads, create_template):
    template = create_template()
    before = set(uploads.root.iterdir())

    for field in ("custom_logo", "footer_logo"):
        response = client.post(
            "/api/page",
            headers=auth_headers,
            data=page_form(template["id"]),
            files={field: image()},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "custom_logo and footer_logo, both are required"
        assert set(uploads.root.iterdir()) == before


def test_create_page_invalid_theme(client, auth_headers, uploads, create_template):
    template = create_template()
    before = set(uploads.root.iterdir())
    bad_theme = {**THEME, "toggle_mode": "yes"}

    response = client.post(
        "/api/page",
        headers=auth_headers,
        data=page_form(template["id"], theme=json.dumps(bad_theme)),
        files={"custom_logo": image(), "footer_logo": image()},
    )
    assert response.status_code == 422
    assert response.json()["message"].startswith("theme")
    assert set(uploads.root.iterdir()) == before


def test_create_page_theme_with_extra_key(client, auth_headers, create_template):
    template = create_template()
    response = client.post(
        "/api/page",
        headers=auth_headers,
        data=page_form(template["id"], theme=json.dumps({**THEME, "extra": "x"})),
        files={"custom_logo": image(), "footer_logo": image()},
    )
    assert response.status_code == 422


def test_create_page_color_longer_than_column(client, auth_headers, uploads, create_template):
    template = create_template()
    before = set(uploads.root.iterdir())

    response = client.post(
        "/api/page",
        headers=auth_headers,
        data=page_form(template["id"], pagination_bg_color="#" * 51),
        files={"custom_logo": image(), "footer_logo": image()},
    )
    assert response.status_code == 422
    assert response.json()["message"] == (
        "pagination_bg_color value must be a string or it is missing"
    )
    assert set(uploads.root.iterdir()) == before


def test_create_page_malformed_template_id(client, auth_headers):
    response = client.post(
        "/api/page",
        headers=auth_headers,
        data=page_form("123"),
        files={"custom_logo": image(), "footer_logo": image()},
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Wrong template id, please try again"


def test_list_pages(client, auth_headers, other_auth_headers, create_template, create_page):
    template = create_template()
    mine = create_page(template["id"])
    theirs = create_page(template["id"], headers=other_auth_headers)
    unrelated = create_page()

    response = client.get("/api/page/all", headers=auth_headers)
    assert len(response.json()) == 3

    response = client.get("/api/page/user/all", headers=auth_headers)
    assert {p["id"] for p in response.json()} == {mine["id"], unrelated["id"]}

    response = client.get(f"/api/page/template/{template['id']}", headers=auth_headers)
    assert {p["id"] for p in response.json()} == {mine["id"], theirs["id"]}

    response = client.get(f"/api/page/template/{template['id']}/min", headers=auth_headers)
    assert all(set(p) == {"id", "url", "title", "description"} for p in response.json())

    response = client.get("/api/page/all/min", headers=auth_headers)
    assert len(response.json()) == 3


def test_page_contents(client, auth_headers, create_page):
    page = create_page()
    blocks = [{"type": "text", "content": "hello"}, {"type": "image", "content": {"src": "x"}}]

    response = client.post(
        f"/api/page/{page['id']}/addContents",
        headers=auth_headers,
        data={"contents": json.dumps(blocks[:1])},
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Contents added to the page"

    client.post(
        f"/api/page/{page['id']}/addContents",
        headers=auth_headers,
        data={"contents": json.dumps(blocks[1:])},
    )
    response = client.get(f"/api/page/{page['id']}/getContents", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"id": page["id"], "title": page["title"], "contents": blocks}

    replacement = [{"type": "heading", "content": "Only"}]
    response = client.patch(
        f"/api/page/{page['id']}/contents",
        headers=auth_headers,
        data={"contents": json.dumps(replacement)},
    )
    assert response.status_code == 200
    contents = client.get(f"/api/page/{page['id']}/getContents", headers=auth_headers).json()
    assert contents["contents"] == replacement


def test_page_contents_must_not_be_empty(client, auth_headers, create_page):
    page = create_page()
    response = client.post(
        f"/api/page/{page['id']}/addContents", headers=auth_headers, data={"contents": "[]"}
    )
    assert response.status_code == 422


def test_page_contents_reject_non_finite_numbers(client, auth_headers, create_page):
    page = create_page()
    response = client.post(
        f"/api/page/{page['id']}/addContents",
        headers=auth_headers,
        data={"contents": '[{"type": "text", "content": NaN}, {"type": "n", "content": Infinity}]'},
    )
    assert response.status_code == 422
    assert response.json()["message"] == "contents must be a valid contents array or it is missing"

    contents = client.get(f"/api/page/{page['id']}/getContents", headers=auth_headers).json()
    assert contents["contents"] == []


def test_page_contents_not_owner(client, auth_headers, other_auth_headers, create_page):
    page = create_page()
    response = client.post(
        f"/api/page/{page['id']}/addContents",
        headers=other_auth_headers,
        data={"contents": json.dumps([{"type": "text", "content": "spam"}])},
    )
    assert response.status_code == 401
    contents = client.get(f"/api/page/{page['id']}/getContents", headers=auth_headers).json()
    assert contents["contents"] == []


def test_update_page_replaces_one_logo(client, auth_headers, uploads, create_page):
    page = create_page()
    old_footer = stored_file(uploads, page["footer_logo"])

    response = client.patch(
        f"/api/page/{page['id']}",
        headers=auth_headers,
        data={"description": "New description"},
        files={"footer_logo": image("new-footer.png")},
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Page Updated"

    updated = client.get(f"/api/page/one/{page['id']}", headers=auth_headers).json()
    assert updated["description"] == "New description"
    assert updated["custom_logo"] == page["custom_logo"]
    assert not old_footer.exists()
    assert stored_file(uploads, updated["footer_logo"]).exists()
    assert stored_file(uploads, page["custom_logo"]).exists()


def test_update_page_unknown_field(client, auth_headers, uploads, create_page):
    page = create_page()
    before = set(uploads.root.iterdir())

    response = client.patch(
        f"/api/page/{page['id']}",
        headers=auth_headers,
        data={"contents": "[]"},
        files={"custom_logo": image()},
    )
    assert response.status_code == 400
    assert set(uploads.root.iterdir()) == before


def test_update_page_not_owner(client, auth_headers, other_auth_headers, create_page):
    page = create_page()
    response = client.patch(
        f"/api/page/{page['id']}", headers=other_auth_headers, data={"title": "Hijacked"}
    )
    assert response.status_code == 401
    current = client.get(f"/api/page/one/{page['id']}", headers=auth_headers).json()
    assert current["title"] == page["title"]


def test_delete_page(client, auth_headers, uploads, create_page):
    page = create_page()
    logos = [stored_file(uploads, page["custom_logo"]), stored_file(uploads, page["footer_logo"])]

    response = client.delete(f"/api/page/{page['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Page Deleted"
    assert client.get(f"/api/page/one/{page['id']}", headers=auth_headers).status_code == 404
    assert not any(logo.exists() for logo in logos)


def test_delete_page_not_owner(client, auth_headers, other_auth_headers, create_page):
    page = create_page()
    response = client.delete(f"/api/page/{page['id']}", headers=other_auth_headers)
    assert response.status_code == 401
    assert client.get(f"/api/page/one/{page['id']}", headers=auth_headers).status_code == 200


def test_delete_user_pages(client, auth_headers, uploads, create_page):
    pages = [create_page(), create_page()]

    response = client.delete("/api/page/user/all", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Pages Deleted"
    for page in pages:
        assert not stored_file(uploads, page["custom_logo"]).exists()
        assert not stored_file(uploads, page["footer_logo"]).exists()

    response = client.delete("/api/page/user/all", headers=auth_headers)
    assert response.status_code == 404
