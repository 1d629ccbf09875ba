from fastapi.testclient import TestClient

from app.models.user import User


# --------------------------------------------------
# LOGIN
# --------------------------------------------------
def test_login_creates_user_once(client: TestClient, db_session, auth_headers):
    first = client.post("/api/user/login", headers=auth_headers)
    second = client.post("/api/user/login", headers=auth_headers)

    assert first.status_code == 200
    assert first.json() == {"code": 0, "data": {"openid": auth_headers["x-wx-openid"]}}
    assert second.json() == first.json()

    assert db_session.query(User).filter(User.openid == auth_headers["x-wx-openid"]).count() == 1


def test_create_person_registers_owner(client: TestClient, db_session, auth_headers, uncle):
    client.post("/api/persons", json=uncle, headers=auth_headers)
    assert db_session.query(User).count() == 1


# --------------------------------------------------
# WX OPENID
# --------------------------------------------------
def test_wx_openid_echoes_header_from_gateway(client: TestClient):
    response = client.get(
        "/api/wx_openid",
        headers={"x-wx-source": "miniprogram", "x-wx-openid": "o6_raw"},
    )
    assert response.status_code == 200
    assert response.text == "o6_raw"


def test_wx_openid_without_source_has_no_body(client: TestClient):
    response = client.get("/api/wx_openid", headers={"x-wx-openid": "o6_raw"})
    assert response.status_code == 200
    assert response.text == ""


# --------------------------------------------------
# COUNTER
# --------------------------------------------------
def test_counter_inc_and_clear(client: TestClient):
    assert client.get("/api/count").json() == {"code": 0, "data": 0}

    assert client.post("/api/count", json={"action": "inc"}).json() == {"code": 0, "data": 1}
    assert client.post("/api/count", json={"action": "inc"}).json() == {"code": 0, "data": 2}
    assert client.get("/api/count").json()["data"] == 2

    assert client.post("/api/count", json={"action": "clear"}).json() == {"code": 0, "data": 0}


def test_counter_unknown_action_only_reads(client: TestClient):
    client.post("/api/count", json={"action": "inc"})

    assert client.post("/api/count", json={"action": "dec"}).json()["data"] == 1
    assert client.post("/api/count").json()["data"] == 1


# --------------------------------------------------
# PAGES
# --------------------------------------------------
def test_landing_page(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_health(client: TestClient):
    assert client.get("/health").json() == {"code": 0, "data": {"status": "ok"}}


def test_unknown_route_uses_envelope(client: TestClient):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json()["code"] == 404


def test_counter_ignores_non_object_body(client: TestClient):
    client.post("/api/count", json={"action": "inc"})

    for body in ("inc", ["inc"], 42):
        response = client.post("/api/count", json=body)
        assert response.status_code == 200, body
        assert response.json() == {"code": 0, "data": 1}
