from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from app.core.deps import get_config, get_now, get_source
from app.jobs.ingest.types import EventKind, SourceBatch
from app.main import app

from conftest import FailingSource, StaticSource, raw

NOW = datetime(2024, 5, 1, 8, 0)

BATCHES = [
    SourceBatch("departures", [raw("09:00", flight="D1"), raw("10:10", flight="D2"), raw("11:00", status="Annulé")]),
    SourceBatch("arrivals", [raw("09:25", kind=EventKind.ARRIVAL, flight="A1"), raw("7h", kind=EventKind.ARRIVAL)]),
]


@pytest.fixture
def client(cfg):
    def make(source):
        app.dependency_overrides[get_config] = lambda: cfg
        app.dependency_overrides[get_source] = lambda: source
        app.dependency_overrides[get_now] = lambda: NOW
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()


def test_health(client) -> None:
    resp = client(StaticSource([])).get("/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_quiet_slots(client) -> None:
    resp = client(StaticSource(BATCHES)).get("/v1/quiet-slots")

    assert resp.status_code == 200
    assert resp.json() == {
        "quietSlots": [
            {"debut": "2024-05-01 08:00", "fin": "2024-05-01 09:00", "duree": 60},
            {"debut": "2024-05-01 09:25", "fin": "2024-05-01 10:10", "duree": 45},
        ]
    }


def test_quiet_slots_overrides(client) -> None:
    resp = client(StaticSource(BATCHES)).get(
        "/v1/quiet-slots",
        params={"now": "2024-05-01T09:10", "threshold_minutes": 40},
    )

    assert resp.status_code == 200
    assert resp.json()["quietSlots"] == [
        {"debut": "2024-05-01 09:25", "fin": "2024-05-01 10:10", "duree": 45},
    ]


def test_quiet_slots_with_flights(client) -> None:
    resp = client(StaticSource(BATCHES)).get(
        "/v1/quiet-slots",
        params={"include_flights": "true", "fields": ["flight_number"]},
    )

    assert resp.status_code == 200
    flights = resp.json()["flights"]
    assert [f["flight_number"] for f in flights] == ["D1", "A1", "D2"]
    assert set(flights[0]) == {"kind", "timestamp", "status", "flight_number"}
    assert flights[1]["kind"] == "arrival"
    assert flights[1]["timestamp"] == "2024-05-01T09:25:00"


def test_quiet_slots_empty_upstream(client) -> None:
    resp = client(StaticSource([])).get("/v1/quiet-slots")
    assert resp.status_code == 200
    assert resp.json() == {"quietSlots": []}


@pytest.mark.parametrize(
    "params, status",
    [
        ({"now": "tomorrow"}, 400),
        ({"reference_date": "01/05/2024"}, 400),
        ({"threshold_minutes": 0}, 422),
        ({"threshold_minutes": -30}, 422),
    ],
)
def test_quiet_slots_bad_input(client, params, status) -> None:
    resp = client(StaticSource(BATCHES)).get("/v1/quiet-slots", params=params)
    assert resp.status_code == status


def test_quiet_slots_upstream_down(client) -> None:
    resp = client(FailingSource()).get("/v1/quiet-slots")
    assert resp.status_code == 502
    assert resp.json() == {"detail": "Erreur lors de la récupération des vols."}


def test_flights(client) -> None:
    resp = client(StaticSource(BATCHES)).get("/v1/flights")

    assert resp.status_code == 200
    body = resp.json()
    assert [f["timestamp"] for f in body["flights"]] == [
        "2024-05-01T09:00:00",
        "2024-05-01T09:25:00",
        "2024-05-01T10:10:00",
    ]
    assert body["flights"][0] == {
        "kind": "departure",
        "timestamp": "2024-05-01T09:00:00",
        "status": "A l'heure",
        "carrier": None,
        "flight_number": "D1",
        "destination": None,
        "origin": None,
    }
    assert body["rejected"] == {"cancelled": 1, "malformed_time": 1}


def test_flights_upstream_down(client) -> None:
    resp = client(FailingSource()).get("/v1/flights")
    assert resp.status_code == 502
