"""Tests for file upload, listing, visibility and content endpoints."""

import io

import pytest
from PIL import Image

from common.constants import PAGE_SIZE, THUMBNAIL_WIDTHS
from conftest import encode, wait_until


def _upload(client, headers, **fields):
    return client.post("/files", json=fields, headers=headers)


@pytest.fixture
def owner(register_and_login):
    return register_and_login("bob@dylan.com")


class TestUpload:
    """Test POST /files validation and parent rules."""

    def test_upload_requires_token(self, client):
        response = _upload(client, {}, name="a.txt", type="file", data=encode(b"hello"))

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_upload_file(self, client, owner):
        user_id, headers = owner

        response = _upload(client, headers, name="myText.txt", type="file", data=encode(b"Hello Webstack!\n"))

        assert response.status_code == 201
        body = response.json()
        assert body["userId"] == user_id
        assert body["name"] == "myText.txt"
        assert body["type"] == "file"
        assert body["isPublic"] is False
        assert body["parentId"] == 0
        assert isinstance(body["id"], str)

    def test_create_folder_without_data(self, client, owner):
        _, headers = owner

        response = _upload(client, headers, name="images", type="folder")

        assert response.status_code == 201
        assert response.json()["type"] == "folder"

    @pytest.mark.parametrize("fields,message", [
        ({"type": "file", "data": "aGVsbG8="}, "Missing name"),
        ({"name": "a.txt", "data": "aGVsbG8="}, "Missing type"),
        ({"name": "a.txt", "type": "video", "data": "aGVsbG8="}, "Missing type"),
        ({"name": "a.txt", "type": "file"}, "Missing data"),
        ({"name": "a.png", "type": "image", "data": ""}, "Missing data"),
        ({"name": "a.txt", "type": "file", "data": "not base64!"}, "Invalid data"),
    ])
    def test_upload_validation(self, client, owner, fields, message):
        _, headers = owner

        response = _upload(client, headers, **fields)

        assert response.status_code == 400
        assert response.json() == {"error": message}

    def test_upload_without_body(self, client, owner):
        _, headers = owner

        response = client.post("/files", headers=headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing name"}

    def test_validation_runs_before_parent_lookup(self, client, owner):
        _, headers = owner

        response = _upload(client, headers, name="a.txt", type="file", parentId=999)

        assert response.json() == {"error": "Missing data"}

    def test_upload_into_folder(self, client, owner):
        _, headers = owner
        folder = _upload(client, headers, name="images", type="folder").json()

        response = _upload(client, headers, name="a.txt", type="file", parentId=folder["id"], data=encode(b"a"))

        assert response.status_code == 201
        assert response.json()["parentId"] == folder["id"]

    def test_upload_parent_as_integer(self, client, owner):
        _, headers = owner
        folder = _upload(client, headers, name="images", type="folder").json()

        response = _upload(client, headers, name="a.txt", type="file", parentId=int(folder["id"]), data=encode(b"a"))

        assert response.status_code == 201
        assert response.json()["parentId"] == folder["id"]

    @pytest.mark.parametrize("parent_id", [999, "999", "abc", -1])
    def test_upload_parent_not_found(self, client, owner, parent_id):
        _, headers = owner

        response = _upload(client, headers, name="a.txt", type="file", parentId=parent_id, data=encode(b"a"))

        assert response.status_code == 400
        assert response.json() == {"error": "Parent not found"}

    def test_upload_parent_not_folder(self, client, owner):
        _, headers = owner
        parent = _upload(client, headers, name="a.txt", type="file", data=encode(b"a")).json()

        response = _upload(client, headers, name="b.txt", type="file", parentId=parent["id"], data=encode(b"b"))

        assert response.status_code == 400
        assert response.json() == {"error": "Parent is not a folder"}

    def test_upload_into_other_users_folder(self, client, owner, register_and_login):
        _, headers = owner
        _, other_headers = register_and_login("alice@dylan.com")
        folder = _upload(client, other_headers, name="shared", type="folder").json()

        response = _upload(client, headers, name="a.txt", type="file", parentId=folder["id"], data=encode(b"a"))

        assert response.status_code == 201
        assert response.json()["parentId"] == folder["id"]

    def test_upload_public(self, client, owner):
        _, headers = owner

        response = _upload(client, headers, name="a.txt", type="file", isPublic=True, data=encode(b"a"))

        assert response.json()["isPublic"] is True


class TestShowAndList:
    """Test GET /files/:id and GET /files."""

    def test_show_own_file(self, client, owner):
        _, headers = owner
        created = _upload(client, headers, name="a.txt", type="file", data=encode(b"a")).json()

        response = client.get(f"/files/{created['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json() == created

    def test_show_other_users_file(self, client, owner, register_and_login):
        _, headers = owner
        _, other_headers = register_and_login("alice@dylan.com")
        created = _upload(client, headers, name="a.txt", type="file", isPublic=True, data=encode(b"a")).json()

        response = client.get(f"/files/{created['id']}", headers=other_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    @pytest.mark.parametrize("file_id", ["999", "abc", "-1", "99999999999999999999999"])
    def test_show_unknown_or_malformed_id(self, client, owner, file_id):
        _, headers = owner

        response = client.get(f"/files/{file_id}", headers=headers)

        assert response.status_code == 404

    def test_show_requires_token(self, client):
        assert client.get("/files/1").status_code == 401

    def test_list_pagination(self, client, owner):
        _, headers = owner
        created = [
            _upload(client, headers, name=f"f{i}.txt", type="file", data=encode(b"x")).json()
            for i in range(PAGE_SIZE + 5)
        ]

        first = client.get("/files", headers=headers).json()
        second = client.get("/files", params={"page": 1}, headers=headers).json()
        third = client.get("/files", params={"page": 2}, headers=headers).json()

        assert [f["id"] for f in first] == [f["id"] for f in created[:PAGE_SIZE]]
        assert [f["id"] for f in second] == [f["id"] for f in created[PAGE_SIZE:]]
        assert third == []

    def test_list_invalid_page_means_first_page(self, client, owner):
        _, headers = owner
        _upload(client, headers, name="a.txt", type="file", data=encode(b"a"))

        for page in ("abc", "-3"):
            response = client.get("/files", params={"page": page}, headers=headers)
            assert len(response.json()) == 1, page

    def test_list_by_parent(self, client, owner):
        _, headers = owner
        folder = _upload(client, headers, name="images", type="folder").json()
        child = _upload(client, headers, name="a.txt", type="file", parentId=folder["id"], data=encode(b"a")).json()

        in_folder = client.get("/files", params={"parentId": folder["id"]}, headers=headers).json()
        at_root = client.get("/files", headers=headers).json()
        unknown = client.get("/files", params={"parentId": "999"}, headers=headers).json()

        assert in_folder == [child]
        assert at_root == [folder]
        assert unknown == []

    def test_list_non_numeric_parent_means_root(self, client, owner):
        _, headers = owner
        folder = _upload(client, headers, name="images", type="folder").json()

        response = client.get("/files", params={"parentId": "abc"}, headers=headers)

        assert response.json() == [folder]

    def test_list_only_own_files(self, client, owner, register_and_login):
        _, headers = owner
        _, other_headers = register_and_login("alice@dylan.com")
        _upload(client, headers, name="a.txt", type="file", isPublic=True, data=encode(b"a"))

        assert client.get("/files", headers=other_headers).json() == []


class TestVisibility:
    """Test PUT /files/:id/publish and /unpublish."""

    def test_publish_and_unpublish(self, client, owner):
        _, headers = owner
        created = _upload(client, headers, name="a.txt", type="file", data=encode(b"a")).json()

        response = client.put(f"/files/{created['id']}/publish", headers=headers)
        assert response.status_code == 200
        assert response.json()["isPublic"] is True

        response = client.put(f"/files/{created['id']}/unpublish", headers=headers)
        assert response.status_code == 200
        assert response.json() == created

    def test_publish_is_idempotent(self, client, owner):
        _, headers = owner
        created = _upload(client, headers, name="a.txt", type="file", data=encode(b"a")).json()

        client.put(f"/files/{created['id']}/publish", headers=headers)
        response = client.put(f"/files/{created['id']}/publish", headers=headers)

        assert response.status_code == 200
        assert response.json()["isPublic"] is True

    def test_publish_other_users_file(self, client, owner, register_and_login):
        _, headers = owner
        _, other_headers = register_and_login("alice@dylan.com")
        created = _upload(client, headers, name="a.txt", type="file", data=encode(b"a")).json()

        response = client.put(f"/files/{created['id']}/publish", headers=other_headers)

        assert response.status_code == 404
        assert client.get(f"/files/{created['id']}", headers=headers).json()["isPublic"] is False

    def test_publish_requires_token(self, client):
        assert client.put("/files/1/publish").status_code == 401
        assert client.put("/files/1/unpublish").status_code == 401


class TestContent:
    """Test GET /files/:id/data access rules and variants."""

    def test_owner_reads_private_file(self, client, owner):
        _, headers = owner
        created = _upload(client, headers, name="myText.txt", type="file", data=encode(b"Hello Webstack!\n")).json()

        response = client.get(f"/files/{created['id']}/data", headers=headers)

        assert response.status_code == 200
        assert response.content == b"Hello Webstack!\n"
        assert response.headers["content-type"].startswith("text/plain")

    def test_unknown_extension_is_octet_stream(self, client, owner):
        _, headers = owner
        created = _upload(client, headers, name="blob", type="file", data=encode(b"\x00\x01")).json()

        response = client.get(f"/files/{created['id']}/data", headers=headers)

        assert response.headers["content-type"] == "application/octet-stream"

    def test_private_file_hidden_from_others(self, client, owner, register_and_login):
        _, headers = owner
        _, other_headers = register_and_login("alice@dylan.com")
        created = _upload(client, headers, name="a.txt", type="file", data=encode(b"a")).json()

        assert client.get(f"/files/{created['id']}/data").status_code == 404
        response = client.get(f"/files/{created['id']}/data", headers=other_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    def test_publish_then_unpublish_controls_content_access(self, client, owner, register_and_login):
        _, headers_a = owner
        _, headers_b = register_and_login("alice@dylan.com")
        created = _upload(client, headers_a, name="a.txt", type="file", data=encode(b"secret")).json()
        content_url = f"/files/{created['id']}/data"

        assert client.get(content_url, headers=headers_b).status_code == 404

        client.put(f"/files/{created['id']}/publish", headers=headers_a)
        response = client.get(content_url, headers=headers_b)
        assert response.status_code == 200
        assert response.content == b"secret"
        assert client.get(content_url).status_code == 200

        client.put(f"/files/{created['id']}/unpublish", headers=headers_a)
        assert client.get(content_url, headers=headers_b).status_code == 404
        assert client.get(content_url, headers=headers_a).status_code == 200

    def test_invalid_token_reads_public_file(self, client, owner):
        _, headers = owner
        created = _upload(client, headers, name="a.txt", type="file", isPublic=True, data=encode(b"a")).json()

        response = client.get(f"/files/{created['id']}/data", headers={"X-Token": "bogus"})

        assert response.status_code == 200

    def test_folder_has_no_content(self, client, owner):
        _, headers = owner
        folder = _upload(client, headers, name="images", type="folder").json()

        response = client.get(f"/files/{folder['id']}/data", headers=headers)

        assert response.status_code == 400
        assert response.json() == {"error": "A folder doesn't have content"}

    def test_private_folder_hidden_before_folder_check(self, client, owner):
        _, headers = owner
        folder = _upload(client, headers, name="images", type="folder").json()

        assert client.get(f"/files/{folder['id']}/data").status_code == 404

    def test_missing_bytes_is_not_found(self, client, owner, app):
        _, headers = owner
        created = _upload(client, headers, name="a.txt", type="file", data=encode(b"a")).json()
        wait_until(lambda: app.state.thumbnail_pipeline.pending == 0 and app.state.thumbnail_pipeline.in_flight == 0)

        file = app.state.file_repo.get_file(int(created["id"]))
        app.state.artifacts.delete(file.local_path)

        response = client.get(f"/files/{created['id']}/data", headers=headers)
        assert response.status_code == 404

    def test_thumbnails_are_generated(self, client, owner, png_bytes):
        _, headers = owner
        created = _upload(client, headers, name="image.png", type="image", data=encode(png_bytes)).json()
        content_url = f"/files/{created['id']}/data"

        for width in THUMBNAIL_WIDTHS:
            assert wait_until(
                lambda: client.get(content_url, params={"size": width}, headers=headers).status_code == 200
            ), width

            response = client.get(content_url, params={"size": width}, headers=headers)
            assert response.headers["content-type"] == "image/png"
            with Image.open(io.BytesIO(response.content)) as thumbnail:
                assert thumbnail.width == width
                assert thumbnail.height == width // 2

    def test_unsupported_size_serves_original(self, client, owner, png_bytes):
        _, headers = owner
        created = _upload(client, headers, name="image.png", type="image", data=encode(png_bytes)).json()

        response = client.get(f"/files/{created['id']}/data", params={"size": 300}, headers=headers)

        assert response.status_code == 200
        assert response.content == png_bytes

    def test_size_ignored_for_non_images(self, client, owner):
        _, headers = owner
        created = _upload(client, headers, name="a.txt", type="file", data=encode(b"plain")).json()

        response = client.get(f"/files/{created['id']}/data", params={"size": 100}, headers=headers)

        assert response.status_code == 200
        assert response.content == b"plain"


class TestServiceEndpoints:
    """Test /status, /stats and unmatched routes."""

    def test_status(self, client):
        response = client.get("/status")

        assert response.status_code == 200
        assert response.json() == {"redis": True, "db": True}

    def test_stats(self, client, owner):
        _, headers = owner
        folder = _upload(client, headers, name="images", type="folder").json()
        _upload(client, headers, name="a.txt", type="file", parentId=folder["id"], data=encode(b"a"))

        response = client.get("/stats")

        assert response.status_code == 200
        assert response.json() == {"users": 1, "files": 2}

    def test_unknown_endpoint(self, client):
        response = client.get("/nothing/here")

        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}

    def test_request_id_header(self, client):
        response = client.get("/status")

        assert "X-Request-ID" in response.headers
