"""Tests for cottontrace.web.routes.analytics - Isotope analysis views."""


class TestIsotopeList:
    def test_default_page(self, client):
        data = client.get("/api/analytics/isotopes").json()
        assert data["total"] == 20
        assert data["total_pages"] == 2
        dates = [item["test_date"] for item in data["items"]]
        assert dates == sorted(dates, reverse=True)

    def test_filter_by_verification_status(self, client):
        data = client.get(
            "/api/analytics/isotopes", params={"verification_status": "verified", "page_size": 20}
        ).json()
        assert all(item["verification_status"] == "verified" for item in data["items"])

    def test_confidence_bounds_validated(self, client):
        response = client.get("/api/analytics/isotopes", params={"confidence_min": 150})
        assert response.status_code == 422


class TestIsotopeSummary:
    def test_counts(self, client):
        data = client.get("/api/analytics/isotopes/summary").json()
        assert data["verified"] + data["pending"] + data["failed"] == data["total"] == 20
        assert set(data["average_isotopes"]) == {"carbon", "nitrogen", "oxygen", "hydrogen"}

    def test_empty_filter_result(self, client):
        data = client.get("/api/analytics/isotopes/summary", params={"search": "no-such-farm"}).json()
        assert data["total"] == 0
        assert data["average_confidence"] is None
        assert data["region_data"] == {}


class TestIsotopeCharts:
    def test_trend(self, client):
        data = client.get("/api/analytics/isotopes/trend", params={"limit": 5}).json()
        assert len(data["datasets"]) == 4
        assert 1 <= len(data["labels"]) <= 5

    def test_charts(self, client):
        data = client.get("/api/analytics/isotopes/charts").json()
        assert data["verification_status"]["labels"] == ["Verified", "Pending", "Failed"]
        assert sum(data["regions"]["datasets"][0]["data"]) == 20


class TestIsotopeRecord:
    def test_for_batch(self, client):
        data = client.get("/api/analytics/isotopes/BATCH-001").json()
        assert data["record"]["batch_id"] == "BATCH-001"
        assert data["out_of_range"] == []

    def test_missing(self, client):
        assert client.get("/api/analytics/isotopes/BATCH-999").status_code == 404


class TestIsotopeExport:
    def test_xlsx(self, client):
        response = client.get("/api/analytics/isotopes/export", params={"format": "xlsx"})
        assert response.status_code == 200
        assert response.content[:2] == b"PK"

    def test_pdf_rejected(self, client):
        response = client.get("/api/analytics/isotopes/export", params={"format": "pdf"})
        assert response.status_code == 400
