FULL_PAYLOAD = {
    "medications": [
        {"name": "Metformin", "dose": "500mg", "frequency": "twice daily"},
        {"name": "Lisinopril", "dose": "10", "unit": "mg"},
    ],
    "labs": [{"test_name": "HbA1c", "value": 6.5, "unit": "%", "is_abnormal": True}],
    "timeline": [{"timestamp": "2026-09-01", "event_type": "lab", "title": "Bloodwork"}],
    "appointment": {"date": "2026-11-02", "doctor_name": "Dr. Rivera"},
    "profile": {"name": "Sam Lee", "allergies": ["Penicillin"]},
}


def _set_connectivity(client, authoritative_reachable=False, local_model="unloaded"):
    response = client.put(
        "/api/v1/connectivity",
        json={"authoritative_reachable": authoritative_reachable, "local_model": local_model},
    )
    assert response.status_code == 200


def test_route_offline_falls_back_to_section(client):
    response = client.post("/api/v1/routing/route", json={"question": "Show my medications"})

    assert response.status_code == 200
    assert response.json() == {"target": "fallback_section", "section_id": "medications"}


def test_route_defers_unanswerable_question(client):
    response = client.post(
        "/api/v1/routing/route", json={"question": "Tell me about my family history"}
    )

    assert response.json() == {
        "target": "deferred",
        "original_query": "Tell me about my family history",
    }


def test_route_to_authoritative_when_connected(client):
    _set_connectivity(client, authoritative_reachable=True)

    response = client.post("/api/v1/routing/route", json={"question": "Show my medications"})

    assert response.json() == {"target": "authoritative"}


def test_route_blocks_dosage_change_when_connected(client):
    _set_connectivity(client, authoritative_reachable=True)

    response = client.post(
        "/api/v1/routing/route",
        json={"question": "Should I stop taking my blood thinner before surgery?"},
    )

    body = response.json()
    assert body["target"] == "safety_blocked"
    assert body["reason"]
    assert body["message"]


def test_route_to_local_model(client):
    client.put("/api/v1/snapshot", json=FULL_PAYLOAD)
    _set_connectivity(client, local_model="ready")

    response = client.post(
        "/api/v1/routing/route",
        json={"question": "What medication did I take and what were my lab results last time?"},
    )

    body = response.json()
    assert body["target"] == "local_model"
    assert body["confidence_tier"] == "high"
    assert body["scope"]["medications"] is True
    assert body["scope"]["labs"] is True
    assert body["scope"]["timeline"] is True
    assert body["scope"]["profile"] is True


def test_route_rejects_empty_question(client):
    response = client.post("/api/v1/routing/route", json={"question": ""})

    assert response.status_code == 422


def test_safety_check(client):
    response = client.post("/api/v1/routing/safety-check", json={"question": "I have chest pain"})

    assert response.status_code == 200
    body = response.json()
    assert body["blocked"] is True
    assert body["category"] == "emergency"
    assert body["authoritative_engine_allowed"] is False


def test_safety_check_allows_routine_question(client):
    response = client.post(
        "/api/v1/routing/safety-check", json={"question": "When is my next appointment?"}
    )

    assert response.json() == {
        "blocked": False,
        "authoritative_engine_allowed": False,
        "category": None,
        "reason": None,
        "user_message": None,
    }


def test_list_quick_questions(client):
    response = client.get("/api/v1/routing/quick-questions")

    assert response.status_code == 200
    questions = {q["id"]: q for q in response.json()}
    assert set(questions) == {
        "my_medications",
        "next_appointment",
        "recent_labs",
        "doctor_questions",
        "active_alerts",
    }
    assert questions["my_medications"]["pre_classified_scope"]["medications"] is True
    assert questions["doctor_questions"]["pre_classified_scope"] is None
    assert questions["doctor_questions"]["local_model_capable"] is False


def test_route_quick_question(client):
    _set_connectivity(client, local_model="ready")

    response = client.post("/api/v1/routing/quick-questions/recent_labs")

    body = response.json()
    assert body["target"] == "local_model"
    assert body["confidence_tier"] == "high"
    assert body["scope"]["labs"] is True


def test_route_unknown_quick_question(client):
    response = client.post("/api/v1/routing/quick-questions/nope")

    assert response.status_code == 404


def test_routes_are_counted(client):
    client.post("/api/v1/routing/route", json={"question": "Show my medications"})

    response = client.get("/metrics")

    assert 'trustgate_safety_events_total{event="route_fallback_section"} 1' in response.text
