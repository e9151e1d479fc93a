from aiohttp import ClientConnectionError
from fastapi.testclient import TestClient
import pytest

from passforge.breach import AiohttpRangeTransport
from passforge.main import app


PASSWORD_SUFFIX = "1E4C9B93F3F0682250B6CF8331B7EE68FD8"


@pytest.fixture
def client():
    # No lifespan: the breach transport is injected per test
    yield TestClient(app)
    app.state.breach_transport = None


def test_healthz(client):
    assert client.get("/healthz").status_code == 200


def test_analyze_returns_analysis(client):
    response = client.post("/api/analyze", json={"password": "password"})

    assert response.status_code == 200
    analysis = response.json()["analysis"]
    assert analysis["tier"] == "very_weak"
    assert analysis["patterns"]["is_common_password"] is True
    assert analysis["feedback"][0]["kind"] == "negative"


def test_analyze_empty_is_a_reset(client):
    response = client.post("/api/analyze", json={"password": ""})

    assert response.status_code == 200
    assert response.json() == {"analysis": None}


def test_generate_with_options(client):
    response = client.post(
        "/api/generate",
        json={"length": 24, "include_symbols": False, "exclude_ambiguous": True},
    )

    assert response.status_code == 200
    password = response.json()["password"]
    assert len(password) == 24
    assert password.isalnum()


def test_generate_without_classes_is_422(client):
    response = client.post(
        "/api/generate",
        json={
            "include_uppercase": False,
            "include_lowercase": False,
            "include_digits": False,
            "include_symbols": False,
        },
    )

    assert response.status_code == 422
    assert "character type" in response.json()["detail"]


def test_generate_length_out_of_range_is_422(client):
    assert client.post("/api/generate", json={"length": 0}).status_code == 422


def test_breach_match(client, fake_transport):
    transport = fake_transport(f"{PASSWORD_SUFFIX}:37\r\n")
    app.state.breach_transport = transport

    response = client.post("/api/breach", json={"password": "password"})

    assert response.status_code == 200
    assert response.json() == {
        "hash_prefix": "5BAA6",
        "match_found": True,
        "occurrence_count": 37,
    }
    assert transport.prefixes == ["5BAA6"]


def test_breach_empty_is_400(client, fake_transport):
    app.state.breach_transport = fake_transport("")
    assert client.post("/api/breach", json={"password": ""}).status_code == 400


def test_breach_unavailable_is_503(client, fake_transport):
    app.state.breach_transport = fake_transport(
        error=ClientConnectionError("no route to host")
    )

    response = client.post("/api/breach", json={"password": "password"})

    assert response.status_code == 503


def test_lifespan_installs_http_transport():
    with TestClient(app) as managed:
        assert isinstance(managed.app.state.breach_transport, AiohttpRangeTransport)


def test_generate_length_below_class_count_is_422(client):
    response = client.post("/api/generate", json={"length": 2})

    assert response.status_code == 422
    assert "too short" in str(response.json()["detail"])
