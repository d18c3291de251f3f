"""HTTP behaviour of the /growth endpoints."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from tango_crm.domain.models import Niche
from tango_crm.services.dependencies import get_revenue_repository
from tests.conftest import utc


@pytest.fixture
def seeded(add_entry):
    add_entry("100", utc(2024, 1, 15))
    add_entry("50", utc(2023, 12, 20))


class TestAuthentication:

    def test_missing_token(self, client):
        response = client.get("/growth", params={"periodType": "month"})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get(
            "/growth",
            params={"periodType": "month"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid or expired token."}


class TestGetGrowth:

    def test_month_growth(self, client, creator_headers, seeded):
        response = client.get("/growth", params={"periodType": "month"}, headers=creator_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["currentPeriodTotal"] == 100.0
        assert body["previousPeriodTotal"] == 50.0
        assert body["growthRatePercent"] == 100.0
        assert body["periodType"] == "month"
        assert body["periodWindow"]["start"].startswith("2024-01-01")
        assert body["comparisonWindow"]["start"].startswith("2023-12-01")
        assert "trendAnalysis" not in body

    def test_with_trend(self, client, creator_headers, seeded):
        response = client.get(
            "/growth",
            params={"periodType": "month", "trendPeriods": 3},
            headers=creator_headers,
        )
        assert response.status_code == 200
        trend = response.json()["trendAnalysis"]
        assert len(trend) == 3
        assert [t["periodWindow"]["start"][:10] for t in trend] == ["2024-01-01", "2023-12-01", "2023-11-01"]

    def test_custom_period(self, client, creator_headers, add_entry):
        add_entry("40", utc(2024, 1, 12))
        add_entry("80", utc(2024, 1, 5))
        response = client.get(
            "/growth",
            params={"periodType": "custom", "startDate": "2024-01-10", "endDate": "2024-01-20"},
            headers=creator_headers,
        )
        assert response.status_code == 200
        assert response.json()["growthRatePercent"] == -50.0

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"periodType": "custom"},
            {"periodType": "custom", "startDate": "2024-01-01"},
            {"periodType": "week"},
            {"periodType": "month", "precision": 11},
            {"periodType": "month", "niche": "plumber"},
            {"periodType": "custom", "startDate": "yesterday", "endDate": "2024-01-01"},
            {"periodType": "custom", "startDate": "2024-01-01", "endDate": "2024-01-02", "trendPeriods": 2},
            {"periodType": "month", "trendPeriods": 99},
            {"periodType": "custom", "startDate": "0001-01-01T00:00:00+05:00", "endDate": "2024-01-01"},
        ],
    )
    def test_bad_parameters(self, client, creator_headers, params):
        response = client.get("/growth", params=params, headers=creator_headers)
        assert response.status_code == 400
        assert response.json()["detail"]

    def test_range_reaching_before_year_one(self, client, creator_headers):
        response = client.get(
            "/growth",
            params={"periodType": "custom", "startDate": "0001-06-01", "endDate": "9000-01-01"},
            headers=creator_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"detail": "Custom range too large"}

    def test_precision(self, client, creator_headers, add_entry):
        add_entry("1", utc(2024, 1, 5))
        add_entry("3", utc(2023, 12, 5))
        response = client.get(
            "/growth", params={"periodType": "month", "precision": 4}, headers=creator_headers
        )
        assert response.json()["growthRatePercent"] == -66.6667

    def test_unsubscribed_niche_forbidden(self, client, creator_headers):
        response = client.get(
            "/growth", params={"periodType": "month", "niche": "coach"}, headers=creator_headers
        )
        assert response.status_code == 403

    def test_admin_sees_every_niche(self, client, admin_headers):
        response = client.get(
            "/growth", params={"periodType": "year", "niche": "podcaster"}, headers=admin_headers
        )
        assert response.status_code == 200

    def test_etag_revalidation(self, client, creator_headers, seeded):
        first = client.get("/growth", params={"periodType": "month"}, headers=creator_headers)
        etag = first.headers["ETag"]
        second = client.get(
            "/growth",
            params={"periodType": "month"},
            headers={**creator_headers, "If-None-Match": etag},
        )
        assert second.status_code == 304

    def test_always_revalidated(self, client, creator_headers, seeded):
        response = client.get("/growth", params={"periodType": "month"}, headers=creator_headers)
        assert response.headers["Cache-Control"] == "private, no-cache"
        assert response.headers["Vary"] == "Authorization"

    def test_etag_differs_between_users_with_equal_totals(self, client, creator_headers, admin_headers):
        params = {"periodType": "month", "niche": "creator"}
        ana = client.get("/growth", params=params, headers=creator_headers)
        admin = client.get("/growth", params=params, headers=admin_headers)
        assert ana.json() == admin.json()
        assert ana.headers["ETag"] != admin.headers["ETag"]

    def test_etag_changes_after_new_revenue(self, client, creator_headers, seeded, add_entry):
        first = client.get("/growth", params={"periodType": "month"}, headers=creator_headers)
        add_entry("25", utc(2024, 1, 20))
        second = client.get(
            "/growth",
            params={"periodType": "month"},
            headers={**creator_headers, "If-None-Match": first.headers["ETag"]},
        )
        assert second.status_code == 200
        assert second.json()["currentPeriodTotal"] == 125.0

    def test_data_store_failure_is_generic_500(self, app, creator_headers):
        class BrokenRepository:
            def sum_for_window(self, *args, **kwargs):
                raise OperationalError("SELECT", {}, Exception("connection refused"))

        app.dependency_overrides[get_revenue_repository] = lambda: BrokenRepository()
        with TestClient(app) as client:
            response = client.get("/growth", params={"periodType": "month"}, headers=creator_headers)
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}


class TestPostGrowth:

    def test_custom_comparison(self, client, creator_headers, add_entry):
        add_entry("300", utc(2024, 1, 10))
        add_entry("200", utc(2023, 1, 10))
        response = client.post(
            "/growth",
            json={
                "currentStartDate": "2024-01-01T00:00:00Z",
                "currentEndDate": "2024-02-01T00:00:00Z",
                "previousStartDate": "2023-01-01T00:00:00Z",
                "previousEndDate": "2023-02-01T00:00:00Z",
                "niche": "creator",
            },
            headers=creator_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["growthRatePercent"] == 50.0
        assert body["periodType"] == "custom"
        assert body["absoluteChange"] == 100.0

    def test_missing_dates(self, client, creator_headers):
        response = client.post(
            "/growth",
            json={"currentStartDate": "2024-01-01", "currentEndDate": "2024-02-01"},
            headers=creator_headers,
        )
        assert response.status_code == 400

    def test_overlapping_windows_rejected(self, client, creator_headers):
        response = client.post(
            "/growth",
            json={
                "currentStartDate": "2024-01-01T00:00:00Z",
                "currentEndDate": "2024-02-01T00:00:00Z",
                "previousStartDate": "2023-12-15T00:00:00Z",
                "previousEndDate": "2024-01-15T00:00:00Z",
            },
            headers=creator_headers,
        )
        assert response.status_code == 400

    def test_unknown_fields_rejected(self, client, creator_headers):
        response = client.post(
            "/growth",
            json={
                "currentStartDate": "2024-01-01",
                "currentEndDate": "2024-02-01",
                "previousStartDate": "2023-12-01",
                "previousEndDate": "2024-01-01",
                "userId": "someone-else",
            },
            headers=creator_headers,
        )
        assert response.status_code == 400

    def test_requires_session(self, client):
        response = client.post(
            "/growth",
            json={
                "currentStartDate": "2024-01-01",
                "currentEndDate": "2024-02-01",
                "previousStartDate": "2023-12-01",
                "previousEndDate": "2024-01-01",
            },
        )
        assert response.status_code == 401


class TestExport:

    def test_csv_download(self, client, creator_headers, seeded):
        response = client.get(
            "/growth/export",
            params={"periodType": "month", "trendPeriods": 2},
            headers=creator_headers,
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        lines = response.text.strip().splitlines()
        assert len(lines) == 3

    def test_json_download(self, client, creator_headers, seeded):
        response = client.get(
            "/growth/export",
            params={"periodType": "quarter", "trendPeriods": 4, "format": "json"},
            headers=creator_headers,
        )
        assert response.status_code == 200
        assert len(response.json()) == 4


def test_niche_enum_values_are_routable(client, admin_headers):
    for niche in Niche:
        response = client.get("/growth", params={"periodType": "month", "niche": niche.value}, headers=admin_headers)
        assert response.status_code == 200
