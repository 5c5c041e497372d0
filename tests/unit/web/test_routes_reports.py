"""Tests for cottontrace.web.routes.reports - Saved report generation."""

from cottontrace.models import ReportFormat, ReportType


class TestListReports:
    def test_newest_first(self, client):
        data = client.get("/api/reports").json()

        assert len(data) == 3
        created = [r["created_at"] for r in data]
        assert created == sorted(created, reverse=True)


class TestCreateReport:
    def test_generate_and_download(self, client):
        response = client.post(
            "/api/reports",
            json={"name": "All batches", "type": "traceability", "format": "csv"},
        )

        assert response.status_code == 201
        report = response.json()
        assert report["id"] == "REP-004"
        assert report["status"] == "completed"
        assert report["url"] == "/api/reports/REP-004/download"

        download = client.get(report["url"])
        assert download.status_code == 200
        assert download.headers["content-type"].startswith("text/csv")
        assert download.text.startswith("Batch ID,")

    def test_filters_and_creator(self, client, context):
        report = client.post(
            "/api/reports",
            json={"name": "High scores", "format": "json", "filters": {"sustainability_score_min": 90}},
        ).json()

        assert report["filters"] == {"sustainability_score_min": 90.0}
        assert report["created_by"] == context.config.default_user

    def test_blank_name_rejected(self, client):
        assert client.post("/api/reports", json={"name": ""}).status_code == 422


class TestReportLookup:
    def test_missing(self, client):
        assert client.get("/api/reports/REP-999").status_code == 404

    def test_download_requires_completed_report(self, client, context):
        client.get("/api/reports")
        pending = context.reports.create(
            "Draft", ReportType.CUSTOM, {}, ReportFormat.PDF, "John Smith"
        )

        response = client.get(f"/api/reports/{pending.id}/download")

        assert response.status_code == 409
        assert "generating" in response.json()["detail"]
