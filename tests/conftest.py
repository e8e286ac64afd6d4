"""Shared fixtures: sample usage payloads and a fake HTTP session."""

import pytest
import requests


@pytest.fixture
def current_payload():
    return {
        "lastUpdate": "2025-11-14T10:00:00Z",
        "hourlyUsage": {
            "volume": [
                {"region": "GRA11", "type": "classic", "totalPrice": 10.0},
                {"region": "GRA11", "type": "high-speed", "totalPrice": "5.5"},
            ],
            "instance": [{"reference": "b3-8", "totalPrice": 100}],
            "storage": [{"bucketName": "logs", "totalPrice": 0.25}],
            "snapshot": [],
            "instanceBandwidth": [{"totalPrice": 0.75}],
            "quantum": {"notebook": [{"totalPrice": 2.0}, {"totalPrice": 1.0}]},
            "unknownCategory": [{"totalPrice": 999.0}],
        },
        "monthlyUsage": {
            "savingsPlan": [
                {"flavor": "b3-8", "totalPrice": {"currencyCode": "EUR", "value": 20.0}},
                {"flavor": "b3-16", "totalPrice": {"currencyCode": "EUR", "value": "4.5"}},
            ],
        },
        "resourcesUsage": [
            {"type": "gateway", "totalPrice": 3.0},
            {"type": "floatingip", "totalPrice": 1.2},
            {"type": "gateway", "totalPrice": 2.0},
        ],
        "period": {"from": "2025-11-01T00:00:00Z", "to": "2025-11-14T10:00:00Z"},
        "usableCredits": {"totalCredit": 12.5},
    }


@pytest.fixture
def plans_payload():
    return {
        "projectId": "proj-1",
        "period": {"from": "2025-11-01T00:00:00Z", "to": "2025-11-30T23:59:59Z"},
        "totalSavings": {
            "currencyCode": "EUR",
            "priceInUcents": 1234000000,
            "text": "12.34 €",
            "value": 12.34,
        },
        "flavors": [
            {
                "flavor": "b3-8",
                "fees": {
                    "flatFee": {
                        "details": [
                            {
                                "id": "detail-1",
                                "planName": "Savings Plan b3-8",
                                "size": 2,
                                "totalPrice": {"currencyCode": "EUR", "value": 40.0},
                                "unitPrice": {"currencyCode": "EUR", "value": 20.0},
                            }
                        ],
                        "totalPrice": {"currencyCode": "EUR", "value": 40.0},
                    },
                    "overQuota": {
                        "ids": ["inst-9"],
                        "quantity": 3,
                        "totalPrice": {"currencyCode": "EUR", "value": 1.5},
                        "unitPrice": {"currencyCode": "EUR", "value": 0.5},
                    },
                    "savedAmount": {"currencyCode": "EUR", "value": 12.34},
                    "totalPrice": {"currencyCode": "EUR", "value": 41.5},
                },
                "periods": [
                    {
                        "plansIds": ["plan-1"],
                        "begin": "2025-11-01T00:00:00Z",
                        "end": "2025-11-30T23:59:59Z",
                        "consumptionSize": 3,
                        "coverage": "66.67",
                        "cumulPlanSize": 2,
                        "resourceIds": ["inst-1", "inst-2"],
                        "utilization": "100.00",
                    }
                ],
                "subscriptions": [
                    {
                        "id": "sub-1",
                        "size": 2,
                        "begin": "2025-06-01T00:00:00Z",
                        "end": "2026-05-31T23:59:59Z",
                    }
                ],
            },
            {"flavor": "b3-16", "fees": {}, "periods": [], "subscriptions": []},
        ],
    }


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(
                f"{self.status_code} Client Error", response=self
            )

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Maps request URLs to FakeResponse objects and records calls."""

    def __init__(self, routes):
        self.routes = routes
        self.headers = {}
        self.calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def get(self, url, timeout=None):
        self.calls.append(url)
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if route is None:
            return FakeResponse(status_code=404, text='{"message":"not found"}')
        return route


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def fake_response_factory():
    return FakeResponse
