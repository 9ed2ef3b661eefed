"""Tests for upload staging, cleanup and serving."""

import asyncio
import io
import re

import pytest
from starlette.datastructures import Headers, UploadFile

from src.errors import BadRequestError, NotFoundError, UnsupportedMediaTypeError
from src.services.uploads import (
    UploadManager,
    generate_stored_name,
    public_url,
    sanitize_filename,
    stored_name,
)
from tests.factories import PNG_BYTES


def make_upload(filename="logo.png", content_type="image/png", data=PNG_BYTES) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def stage(manager: UploadManager, upload: UploadFile) -> str:
    return asyncio.run(manager.stage(upload))


def test_sanitize_filename():
    assert sanitize_filename("My Holiday Photo.PNG") == "my-holiday-photo.png"
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("C:\\Users\\me\\a b.jpg") == "a-b.jpg"
    assert sanitize_filename(None) == "upload"


def test_generate_stored_name():
    name = generate_stored_name("Logo.png")
    assert re.fullmatch(r"\d{13}[0-9a-f]{20}-logo\.png", name)
    assert generate_stored_name("Logo.png") != name


def test_public_url_and_stored_name():
    reference = public_url("example.com:5000", "123abc-logo.png")
    assert reference == "example.com:5000/uploads/123abc-logo.png"
    assert stored_name(reference) == "123abc-logo.png"
    assert stored_name("https://lh3.googleusercontent.com/a/photo") is None
    assert stored_name(None) is None


def test_stage_writes_file(uploads):
    name = stage(uploads, make_upload())
    assert (uploads.root / name).read_bytes() == PNG_BYTES


def test_stage_rejects_unsupported_type(uploads):
    with pytest.raises(UnsupportedMediaTypeError):
        stage(uploads, make_upload("a.gif", "image/gif"))
    assert list(uploads.root.iterdir()) == []


def test_stage_rejects_oversized_file(uploads):
    with pytest.raises(BadRequestError):
        stage(uploads, make_upload(data=b"\x00" * (uploads.max_bytes + 1)))
    assert list(uploads.root.iterdir()) == []


def test_resolve_rejects_path_components(uploads):
    for name in ("../secret", "a/b.png", "..", ""):
        with pytest.raises(NotFoundError):
            uploads.resolve(name)


def test_discard_is_idempotent(uploads):
    name = stage(uploads, make_upload())
    assert uploads.discard(name) is True
    assert uploads.discard(name) is True
    assert uploads.discard("../outside") is False


def test_scope_discards_staged_files_without_commit(uploads):
    with pytest.raises(BadRequestError):
        with uploads.scope() as scope:
            asyncio.run(scope.stage(make_upload()))
            raise BadRequestError("later failure")
    assert list(uploads.root.iterdir()) == []


def test_scope_commit_keeps_new_and_discards_replaced(uploads):
    old = stage(uploads, make_upload("old.png"))
    with uploads.scope() as scope:
        new = asyncio.run(scope.stage(make_upload("new.png")))
        scope.replace(public_url("host", old))
        scope.commit()
    assert (uploads.root / new).exists()
    assert not (uploads.root / old).exists()


def test_scope_without_commit_keeps_replaced(uploads):
    old = stage(uploads, make_upload("old.png"))
    with uploads.scope() as scope:
        asyncio.run(scope.stage(make_upload("new.png")))
        scope.replace(public_url("host", old))
    assert [path.name for path in uploads.root.iterdir()] == [old]


def test_serve_upload(client, auth_headers, uploads):
    name = stage(uploads, make_upload())
    response = client.get(f"/uploads/{name}", headers=auth_headers)
    assert response.status_code == 200
    assert response.content == PNG_BYTES


def test_serve_upload_requires_auth(client, uploads):
    name = stage(uploads, make_upload())
    assert client.get(f"/uploads/{name}").status_code == 401


def test_serve_missing_upload(client, auth_headers):
    response = client.get("/uploads/nothing.png", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "File not found"
