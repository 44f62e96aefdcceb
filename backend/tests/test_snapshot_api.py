from trustgate.services.snapshot import ModelState


def test_snapshot_starts_empty(client):
    response = client.get("/api/v1/snapshot")

    assert response.status_code == 200
    assert response.json() == {
        "medications": 0,
        "labs": 0,
        "timeline": 0,
        "alerts": 0,
        "has_appointment": False,
        "has_profile": False,
        "synced_at": None,
    }


def test_replace_snapshot(client, snapshot_store):
    payload = {
        "medications": [{"name": "Metformin", "dose": "500mg"}],
        "labs": [
            {"test_name": "HbA1c", "value": 6.5, "unit": "%"},
            {"test_name": "Urinalysis", "value": "Negative"},
        ],
        "alerts": [{"title": "HbA1c above range", "severity": "warning"}],
        "profile": {"name": "Sam Lee"},
        "synced_at": "2026-10-19T09:00:00Z",
    }

    response = client.put("/api/v1/snapshot", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["medications"] == 1
    assert body["labs"] == 2
    assert body["alerts"] == 1
    assert body["has_profile"] is True
    assert body["synced_at"].startswith("2026-10-19T09:00:00")

    stored = snapshot_store.get_snapshot()
    assert stored.find_medication("metformin").dose == "500mg"
    assert stored.find_lab("HbA1c").numeric_value == 6.5
    assert stored.find_lab("Urinalysis").numeric_value is None


def test_replace_snapshot_swaps_whole_snapshot(client, snapshot_store):
    client.put("/api/v1/snapshot", json={"medications": [{"name": "Metformin", "dose": "500mg"}]})
    client.put("/api/v1/snapshot", json={"labs": [{"test_name": "HbA1c", "value": 6.5}]})

    stored = snapshot_store.get_snapshot()
    assert stored.medications == ()
    assert len(stored.labs) == 1


def test_replace_snapshot_rejects_invalid_payload(client):
    response = client.put("/api/v1/snapshot", json={"medications": [{"dose": "500mg"}]})

    assert response.status_code == 422


def test_connectivity_roundtrip(client, snapshot_store):
    response = client.put(
        "/api/v1/connectivity",
        json={"authoritative_reachable": True, "local_model": "ready"},
    )

    assert response.status_code == 200
    assert response.json() == {"authoritative_reachable": True, "local_model": "ready"}
    assert snapshot_store.get_connectivity().local_model is ModelState.READY

    assert client.get("/api/v1/connectivity").json() == {
        "authoritative_reachable": True,
        "local_model": "ready",
    }


def test_connectivity_rejects_unknown_model_state(client):
    response = client.put("/api/v1/connectivity", json={"local_model": "warming"})

    assert response.status_code == 422
