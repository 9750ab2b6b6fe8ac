from fastapi.testclient import TestClient

from apps.api.main import app
from tests.factories import DOCTOR_ID, NOW, case_payload, minutes_ago


def test_assess_route_gates_actions() -> None:
    client = TestClient(app)
    response = client.post(
        "/v1/cases/assess",
        json={
            "case": case_payload(status="InReview", doctorId=DOCTOR_ID, createdAt=minutes_ago(40).isoformat()),
            "doctor_id": DOCTOR_ID,
            "now": NOW.isoformat(),
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["sla_status"] == "Breached"
    assert payload["actions"] == ["View", "Chat", "Diagnose"]
    assert payload["diagnosis_mode"] == "submit"


def test_assess_route_custom_target() -> None:
    client = TestClient(app)
    response = client.post(
        "/v1/cases/assess",
        json={
            "case": case_payload(createdAt=minutes_ago(40).isoformat()),
            "now": NOW.isoformat(),
            "target_minutes": 120,
        },
    )
    assert response.json()["sla_status"] == "OnTrack"


def test_assess_route_rejects_bad_case() -> None:
    client = TestClient(app)
    response = client.post("/v1/cases/assess", json={"case": {"id": "x"}})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "invalid_input"
    assert "caseNumber" in error["detail"]["fields"]


def test_classify_route() -> None:
    client = TestClient(app)
    response = client.post("/v1/drugs/classify", json={"names": ["Tramadol 50mg", "Paracetamol", "Amoxicillin"]})
    assert response.status_code == 200
    results = response.json()["results"]
    assert [r["type"] for r in results] == ["Controlled", "OTC", "PrescriptionOnly"]
    assert results[1]["isOTC"] is True


def test_classify_route_requires_names() -> None:
    client = TestClient(app)
    response = client.post("/v1/drugs/classify", json={"names": []})
    assert response.status_code == 400
