import pytest

from inventory_api.core.errors import RepositoryError

from conftest import stored_files


def register(client, name="Laptop", description=None, photo=None, filename="photo.jpg"):
    data = {"name": name}
    if description is not None:
        data["description"] = description
    files = {"photo": (filename, photo, "image/jpeg")} if photo is not None else None
    return client.post("/register", data=data, files=files)


def test_laptop_photo_lifecycle(client, upload_dir):
    resp = register(client, "Laptop", "Dell", b"photoA")
    assert resp.status_code == 201
    assert resp.json() == {
        "id": 1,
        "name": "Laptop",
        "description": "Dell",
        "photo_url": "/inventory/1/photo",
    }

    resp = client.get("/inventory/1/photo")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/jpeg"
    assert resp.content == b"photoA"
    [photo_a] = stored_files(upload_dir)

    resp = client.put("/inventory/1/photo", files={"photo": ("b.jpg", b"photoB", "image/jpeg")})
    assert resp.status_code == 200
    assert resp.json()["photo_url"] == "/inventory/1/photo"
    assert client.get("/inventory/1/photo").content == b"photoB"
    [photo_b] = stored_files(upload_dir)
    assert photo_b != photo_a

    resp = client.delete("/inventory/1")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Item 1 deleted"}
    assert client.get("/inventory/1").status_code == 404
    assert client.get("/inventory/1/photo").status_code == 404
    assert stored_files(upload_dir) == []


def test_register_without_photo(client, upload_dir):
    resp = register(client, "Mouse")

    assert resp.status_code == 201
    assert resp.json()["description"] == ""
    assert resp.json()["photo_url"] is None
    assert stored_files(upload_dir) == []


@pytest.mark.parametrize("name", ["", "   "])
def test_register_blank_name_is_rejected(client, upload_dir, name):
    resp = register(client, name, photo=b"photoA")

    assert resp.status_code == 400
    assert stored_files(upload_dir) == []
    assert client.get("/inventory").json() == []


def test_register_missing_name_is_rejected(client):
    resp = client.post("/register", data={"description": "no name"})
    assert resp.status_code == 400


def test_list_inventory(client):
    register(client, "Laptop", photo=b"a")
    register(client, "Mouse")

    resp = client.get("/inventory")

    assert resp.status_code == 200
    assert [(i["name"], i["photo_url"]) for i in resp.json()] == [
        ("Laptop", "/inventory/1/photo"),
        ("Mouse", None),
    ]


def test_get_item(client):
    register(client, "Laptop", "Dell")

    resp = client.get("/inventory/1")

    assert resp.status_code == 200
    assert resp.json() == {"id": 1, "name": "Laptop", "description": "Dell", "photo_url": None}


@pytest.mark.parametrize(
    "path",
    [
        "/inventory/2",
        "/inventory/abc",
        "/inventory/0",
        "/inventory/abc/photo",
        "/inventory/2147483648",
        "/inventory/99999999999999999999",
        "/inventory/99999999999999999999/photo",
    ],
)
def test_unknown_or_malformed_ids_are_404(client, path):
    register(client, "Laptop")
    assert client.get(path).status_code == 404


def test_update_item_partially(client):
    register(client, "Laptop", "Dell")

    resp = client.put("/inventory/1", json={"name": "Notebook", "description": ""})

    assert resp.status_code == 200
    assert resp.json() == {"id": 1, "name": "Notebook", "description": "Dell", "photo_url": None}
    resp = client.put("/inventory/1", json={"description": "Dell XPS"})
    assert resp.json()["name"] == "Notebook"
    assert resp.json()["description"] == "Dell XPS"


def test_update_unknown_item(client):
    assert client.put("/inventory/5", json={"name": "x"}).status_code == 404


def test_delete_unknown_item(client):
    assert client.delete("/inventory/5").status_code == 404


def test_get_photo_when_item_has_none(client):
    register(client, "Mouse")
    resp = client.get("/inventory/1/photo")
    assert resp.status_code == 404


def test_replace_photo_without_file(client):
    register(client, "Laptop")
    resp = client.put("/inventory/1/photo", data={"note": "no file"})
    assert resp.status_code == 400


def test_replace_photo_unknown_item(client, upload_dir):
    resp = client.put("/inventory/9/photo", files={"photo": ("b.jpg", b"photoB", "image/jpeg")})

    assert resp.status_code == 404
    assert stored_files(upload_dir) == []


def test_search_by_json_and_form(client):
    register(client, "Laptop", "Dell", b"photoA")

    by_json = client.post("/search", json={"id": 1})
    by_form = client.post("/search", data={"id": "1"})

    assert by_json.status_code == 201
    assert by_form.status_code == 201
    expected = {"id": 1, "name": "Laptop", "description": "Dell", "photo_url": "/inventory/1/photo"}
    assert by_json.json() == expected
    assert by_form.json() == expected


@pytest.mark.parametrize(
    "kwargs, status",
    [
        ({"json": {"id": "abc"}}, 400),
        ({"data": {"id": "abc"}}, 400),
        ({"json": {}}, 400),
        ({}, 400),
        ({"json": {"id": 999999}}, 404),
        ({"json": {"id": 10**20}}, 404),
        ({"json": {"id": "1e20"}}, 404),
        ({"data": {"id": "99999999999999999999"}}, 404),
    ],
)
def test_search_failures(client, kwargs, status):
    register(client, "Laptop")
    assert client.post("/search", **kwargs).status_code == status


@pytest.mark.parametrize(
    "method, path, allow",
    [
        ("GET", "/register", "POST"),
        ("DELETE", "/inventory", "GET"),
        ("POST", "/inventory/1", "GET, PUT, DELETE"),
        ("PATCH", "/inventory/1", "GET, PUT, DELETE"),
        ("DELETE", "/inventory/1/photo", "GET, PUT"),
        ("GET", "/search", "POST"),
    ],
)
def test_unsupported_methods_return_405(client, method, path, allow):
    resp = client.request(method, path)

    assert resp.status_code == 405
    assert resp.headers["allow"] == allow


def test_backend_failures_are_opaque(client, app, monkeypatch):
    repository = app.state.inventory_service.repository

    def broken_list_all():
        raise RepositoryError("connection to secret-host refused")

    monkeypatch.setattr(repository, "list_all", broken_list_all)

    resp = client.get("/inventory")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
    assert "secret-host" not in resp.text


def test_health_endpoints(client):
    assert client.get("/").json() == {"message": "Healthy"}
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/health/db").json() == {"status": "ok"}


def test_health_db_reports_unavailable_repository(client, app, monkeypatch):
    repository = app.state.inventory_service.repository

    def broken_ping():
        raise RepositoryError("down")

    monkeypatch.setattr(repository, "ping", broken_ping)

    assert client.get("/health/db").status_code == 503


def test_upload_dir_created_on_startup(app, upload_dir):
    assert upload_dir.is_dir()
