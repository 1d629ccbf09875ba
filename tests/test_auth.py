import pytest
from fastapi.testclient import TestClient

from app.auth import HeaderIdentityVerifier, get_identity_verifier
from app.main import app
from app.models.person import Person
from app.models.user import User


REGISTRY_CALLS = [
    ("post", "/api/user/login", None),
    ("get", "/api/persons", None),
    ("post", "/api/persons", {"id": "dad_1", "name": "dad", "path": ["father"]}),
    ("get", "/api/persons/dad_1", None),
    ("put", "/api/persons/dad_1", {"name": "papa"}),
    ("delete", "/api/persons/dad_1", None),
    ("post", "/api/persons/sync", {"persons": []}),
]


@pytest.mark.parametrize("method,url,body", REGISTRY_CALLS)
def test_registry_endpoints_require_openid(client: TestClient, db_session, method, url, body):
    kwargs = {"json": body} if body is not None else {}
    response = client.request(method.upper(), url, **kwargs)

    assert response.status_code == 401
    assert response.json() == {"code": 401, "message": "未登录或 openid 缺失"}

    assert db_session.query(User).count() == 0
    assert db_session.query(Person).count() == 0


def test_blank_openid_is_unauthenticated(client: TestClient):
    response = client.get("/api/persons", headers={"x-wx-openid": "   "})
    assert response.status_code == 401


def test_missing_openid_wins_over_invalid_body(client: TestClient):
    response = client.post("/api/persons", json={"name": "no id"})
    assert response.status_code == 401


def test_header_lookup_is_case_insensitive(client: TestClient):
    response = client.get("/api/persons", headers={"X-WX-OPENID": "o6_upper"})
    assert response.status_code == 200
    assert response.json() == {"code": 0, "data": []}


def test_verifier_can_be_replaced(client: TestClient):
    app.dependency_overrides[get_identity_verifier] = lambda: HeaderIdentityVerifier("x-test-user")

    assert client.get("/api/persons", headers={"x-wx-openid": "o6_alice"}).status_code == 401

    response = client.post("/api/user/login", headers={"x-test-user": "o6_gateway_user"})
    assert response.status_code == 200
    assert response.json()["data"] == {"openid": "o6_gateway_user"}


@pytest.mark.parametrize("url", ["/api/persons", "/api/persons/sync", "/api/user/login"])
def test_malformed_body_without_openid_is_unauthenticated(client: TestClient, db_session, url):
    response = client.post(url, content=b"{", headers={"content-type": "application/json"})

    assert response.status_code == 401
    assert response.json() == {"code": 401, "message": "未登录或 openid 缺失"}
    assert db_session.query(User).count() == 0


def test_malformed_update_without_openid_is_unauthenticated(client: TestClient):
    response = client.put(
        "/api/persons/dad_1", content=b"{", headers={"content-type": "application/json"}
    )
    assert response.status_code == 401


def test_public_routes_skip_the_gate(client: TestClient):
    assert client.get("/api/count").status_code == 200
    assert client.get("/api/wx_openid").status_code == 200
