"""Request payload builders shared by the API tests."""

import json

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

THEME = {
    "type": "light",
    "header_color": "#111111",
    "subheader_color": "#222222",
    "bg_color": "#ffffff",
    "links_color": "#0000ff",
    "toggle_mode": True,
    "default_mode": "light",
}

FOOTER_CONFIG = {
    "copyright_text": "(c) Example",
    "copyright_color": "#333333",
    "links_color": "#0000ff",
    "bg_color": "#eeeeee",
    "navigation": [
        {
            "section_title": "About",
            "links": [{"link_title": "Home", "link_url": "https://example.com"}],
        }
    ],
}


def image(name: str = "logo.png", content_type: str = "image/png"):
    """A multipart file tuple for TestClient."""
    return (name, PNG_BYTES, content_type)


def template_form(**overrides) -> dict:
    form = {
        "url": "https://example.com",
        "font_family": "Inter",
        "corner_styles": "rounded",
        "header": "true",
        "pagination": "false",
        "title": "My Template",
        "links": json.dumps([{"title": "Blog", "url": "https://blog.example.com"}]),
    }
    form.update(overrides)
    return form


def page_form(template_id: str, **overrides) -> dict:
    form = {
        "title": "My Page",
        "description": "A page about things",
        "icon": "star",
        "template_id": template_id,
        "url": "https://example.com/page",
        "font_family": "Inter",
        "corner_styles": "square",
        "footer_toggle": "true",
        "pagination_bg_color": "#000000",
        "pagination_text_color": "#ffffff",
        "theme": json.dumps(THEME),
        "footer_config": json.dumps(FOOTER_CONFIG),
    }
    form.update(overrides)
    return form
