from __future__ import annotations

from fastapi.testclient import TestClient

from seqharness.app.main import create_app
from seqharness.cases.text_layout_modified_metrics import CASE_NAME


def test_health() -> None:
    with TestClient(create_app()) as client:
        r = client.get("/api/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["harness_attached"] is False


def test_no_harness_attached() -> None:
    with TestClient(create_app()) as client:
        assert client.get("/api/harness").status_code == 409
        assert client.post("/api/harness/keys/ArrowRight").status_code == 409


def test_key_presses_drive_the_live_harness() -> None:
    with TestClient(create_app(case_name=CASE_NAME)) as client:
        assert client.get("/api/health").json()["harness_attached"] is True

        status = client.get("/api/harness").json()
        assert status["case"] == CASE_NAME
        assert status["index"] == 0
        assert status["display"] == "1"
        assert status["bound"] is True

        for expected in ("2", "3", "4", "5", "1"):
            r = client.post("/api/harness/keys/ArrowRight", params={"wait": True})
            assert r.status_code == 200
            assert r.json()["accepted"] is True
            assert client.get("/api/harness").json()["display"] == expected

        r = client.post("/api/harness/keys/ArrowLeft", params={"wait": True})
        assert r.json()["accepted"] is False
        assert client.get("/api/harness").json()["index"] == 0

    # detached on shutdown
    with TestClient(create_app()) as client:
        assert client.get("/api/harness").status_code == 409
