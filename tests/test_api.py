from ueweb.api import app


def test_home():
    client = app.test_client()
    res = client.get("/")
    assert res.status_code == 200
    assert "running" in res.get_json()["message"]


def test_score_route():
    client = app.test_client()
    res = client.post("/score", json={"password": "123456789"})
    assert res.status_code == 200
    data = res.get_json()
    assert data["sets"] == ["common-password"]
    assert data["length"] == 1
    assert data["legal"] is True
    assert data["max_entropy_scale"] == 128


def test_score_route_without_body():
    client = app.test_client()
    res = client.post("/score")
    assert res.status_code == 200
    assert res.get_json()["length"] == 0


def test_classify_route():
    client = app.test_client()
    res = client.post("/classify", json={"text": "aԱ"})
    chars = res.get_json()["characters"]
    assert chars[0]["set"] == "latin-small"
    assert chars[1]["set"] == "unknown"


def test_non_object_bodies_score_as_empty():
    client = app.test_client()
    for body in ([1], "password", 7):
        res = client.post("/score", json=body)
        assert res.status_code == 200
        assert res.get_json()["length"] == 0
    res = client.post("/classify", json=["a"])
    assert res.status_code == 200
    assert res.get_json()["characters"] == []
