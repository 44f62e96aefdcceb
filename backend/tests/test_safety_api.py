from trustgate.services.safety.output_sanitize import TRUNCATION_DISCLAIMER
from trustgate.services.safety.types import BLOCKED_FALLBACK_MESSAGE

SNAPSHOT_PAYLOAD = {
    "medications": [{"name": "Metformin", "dose": "500mg", "frequency": "twice daily"}],
    "labs": [{"test_name": "HbA1c", "value": 6.5, "unit": "%"}],
}


def test_filter_passes_clean_text(client):
    response = client.post(
        "/api/v1/safety/filter",
        json={"text": "Your records show Metformin 500mg twice daily."},
    )

    assert response.status_code == 200
    assert response.json() == {
        "outcome": "passed",
        "text": "Your records show Metformin 500mg twice daily.",
        "possibly_truncated": False,
        "truncation_notice": None,
    }


def test_filter_blocks_alarm_language(client):
    response = client.post("/api/v1/safety/filter", json={"text": "This is dangerous."})

    assert response.status_code == 200
    body = response.json()
    assert body["outcome"] == "blocked"
    assert body["text"] == BLOCKED_FALLBACK_MESSAGE
    assert body["violations"][0]["category"] == "alarm"
    assert body["grounding_issues"] == []


def test_filter_rephrases_against_pushed_snapshot(client):
    client.put("/api/v1/snapshot", json=SNAPSHOT_PAYLOAD)

    response = client.post(
        "/api/v1/safety/filter",
        json={"text": "Your records show Metformin 850mg daily. Your HbA1c was 7.1 in May."},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["outcome"] == "rephrased"
    assert {issue["type"] for issue in body["grounding_issues"]} == {
        "dose_mismatch",
        "value_mismatch",
    }
    dose_issue = next(i for i in body["grounding_issues"] if i["type"] == "dose_mismatch")
    assert dose_issue["claimed"] == "850mg"
    assert dose_issue["cached"] == "500mg"
    assert "850mg" not in body["text"]


def test_filter_flags_possible_truncation(client):
    response = client.post(
        "/api/v1/safety/filter",
        json={"text": "Your records show Metformin and"},
    )

    body = response.json()
    assert body["outcome"] == "passed"
    assert body["possibly_truncated"] is True
    assert body["truncation_notice"] == TRUNCATION_DISCLAIMER


def test_filter_rejects_missing_text(client):
    response = client.post("/api/v1/safety/filter", json={})

    assert response.status_code == 422


def test_filter_outcomes_are_counted(client):
    client.post("/api/v1/safety/filter", json={"text": "This is dangerous."})
    client.post("/api/v1/safety/filter", json={"text": "Your records look complete."})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert 'trustgate_safety_events_total{event="filter_blocked"} 1' in response.text
    assert 'trustgate_safety_events_total{event="filter_passed"} 1' in response.text
    assert 'trustgate_safety_events_total{event="flag_alarm"} 1' in response.text
