"""Tests for API endpoints."""

import pytest
from fastapi.testclient import TestClient

from cola_verify.main import app
from cola_verify.services.health_warning import HEALTH_WARNING_FULL


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def verify_payload():
    """A distilled spirits label whose extracted fields all match."""
    return {
        "beverage_type": "distilled_spirits",
        "application_data": {
            "brand_name": "Old Tom Distillery",
            "alcohol_content": "45% Alc./Vol.",
            "net_contents": "750 mL",
        },
        "extracted_fields": [
            {"field_name": "brand_name", "value": "Old Tom Distillery", "confidence": 0.97,
             "bounding_box": {"x": 0.1, "y": 0.1, "width": 0.6, "height": 0.1}},
            {"field_name": "alcohol_content", "value": "45% ALC/VOL"},
            {"field_name": "net_contents", "value": "750 ML"},
            {"field_name": "health_warning", "value": HEALTH_WARNING_FULL},
        ],
        "container_size_ml": 750,
    }


class TestHealthEndpoint:
    """Test /health endpoint."""

    def test_health_returns_200(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200

    def test_health_response_format(self, client):
        data = client.get("/api/v1/health").json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestRootEndpoint:

    def test_root_contains_version(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "version" in response.json()
        assert "docs" in response.json()


class TestRegistryEndpoints:
    """Test beverage type and strictness lookups."""

    def test_list_beverage_types(self, client):
        data = client.get("/api/v1/beverage-types").json()
        assert {item["beverage_type"] for item in data} == {"distilled_spirits", "wine", "malt_beverage"}

    def test_get_beverage_type(self, client):
        data = client.get("/api/v1/beverage-types/wine").json()
        assert "sulfite_declaration" in data["mandatory_fields"]
        assert 750 in data["valid_sizes_ml"]

    def test_malt_has_no_sizes(self, client):
        data = client.get("/api/v1/beverage-types/malt_beverage").json()
        assert data["valid_sizes_ml"] is None

    def test_unknown_beverage_type_422(self, client):
        assert client.get("/api/v1/beverage-types/cider").status_code == 422

    def test_size_check(self, client):
        data = client.get("/api/v1/beverage-types/distilled_spirits/sizes/800").json()
        assert data["valid"] is False
        assert data["health_warning_min_type_size_mm"] == 2

    def test_strictness_defaults(self, client):
        data = client.get("/api/v1/strictness/defaults").json()
        assert data["defaults"]["brand_name"] == "strict"
        assert data["defaults"]["fanciful_name"] == "lenient"


class TestCompareEndpoint:

    def test_compare_lenient(self, client):
        response = client.post("/api/v1/compare", json={
            "field_name": "brand_name",
            "expected_value": "Bulleit",
            "extracted_value": "Bulleit Bourbon",
            "strictness": "lenient",
        })
        assert response.status_code == 200
        assert response.json()["status"] == "match"

    def test_compare_not_found(self, client):
        data = client.post("/api/v1/compare", json={
            "field_name": "alcohol_content",
            "expected_value": "45%",
        }).json()
        assert data["status"] == "not_found"
        assert data["confidence"] == 0

    def test_invalid_strictness_422(self, client):
        response = client.post("/api/v1/compare", json={
            "field_name": "brand_name",
            "expected_value": "Bulleit",
            "extracted_value": "Bulleit",
            "strictness": "extreme",
        })
        assert response.status_code == 422


class TestExpectedFieldsEndpoint:

    def test_expected_fields(self, client):
        data = client.post("/api/v1/expected-fields", json={
            "beverage_type": "wine",
            "application_data": {"brand_name": "Cooper Ridge", "sulfiteDeclaration": True},
        }).json()
        assert data["fields"] == [
            {"field_name": "brand_name", "expected_value": "Cooper Ridge"},
            {"field_name": "sulfite_declaration", "expected_value": "Contains Sulfites"},
        ]


class TestStatusEndpoint:

    def test_conditional(self, client):
        data = client.post("/api/v1/status", json={
            "beverage_type": "wine",
            "verdicts": [
                {"field_name": "brand_name", "status": "match"},
                {"field_name": "name_and_address", "status": "needs_correction"},
            ],
        }).json()
        assert data == {"status": "conditionally_approved", "deadline_days": 7, "rule": "minor_corrections_only"}

    def test_bad_container_size(self, client):
        data = client.post("/api/v1/status", json={
            "beverage_type": "wine",
            "verdicts": [],
            "container_size_ml": 1750,
        }).json()
        assert data["status"] == "rejected"


class TestVerifyEndpoint:
    """Test /verify endpoint."""

    def test_verify_approved(self, client, verify_payload):
        response = client.post("/api/v1/verify", json=verify_payload)
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "approved"
        assert data["correction_deadline"] is None
        assert len(data["verdicts"]) == 4
        assert data["bounding_boxes"]["brand_name"]["width"] == 0.6
        assert "processing_time_ms" in data

    def test_verify_needs_correction_has_deadline(self, client, verify_payload):
        verify_payload["extracted_fields"].pop()  # no health warning on the label
        data = client.post("/api/v1/verify", json=verify_payload).json()
        assert data["status"] == "needs_correction"
        assert data["deadline_days"] == 30
        assert data["correction_deadline"] is not None

    def test_field_strictness_override(self, client, verify_payload):
        verify_payload["extracted_fields"][0]["value"] = "Old Tom"
        verify_payload["field_strictness"] = {"brand_name": "lenient"}
        data = client.post("/api/v1/verify", json=verify_payload).json()
        assert data["status"] == "approved"

    def test_unknown_strictness_field_422(self, client, verify_payload):
        verify_payload["field_strictness"] = {"label_color": "strict"}
        assert client.post("/api/v1/verify", json=verify_payload).status_code == 422

    def test_unknown_beverage_type_422(self, client, verify_payload):
        verify_payload["beverage_type"] = "cider"
        assert client.post("/api/v1/verify", json=verify_payload).status_code == 422


class TestReviewEndpoint:

    def test_override_approves(self, client):
        response = client.post("/api/v1/review", json={
            "beverage_type": "wine",
            "verdicts": [
                {"field_name": "brand_name", "status": "mismatch"},
                {"field_name": "class_type", "status": "match"},
            ],
            "overrides": [
                {"field_name": "brand_name", "resolved_status": "match", "reviewer_notes": "Stylized logo"},
            ],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "approved"
        assert data["fields"][0] == {"field_name": "brand_name", "status": "match"}

    def test_unknown_override_field(self, client):
        response = client.post("/api/v1/review", json={
            "beverage_type": "wine",
            "verdicts": [{"field_name": "brand_name", "status": "match"}],
            "overrides": [{"field_name": "vintage_year", "resolved_status": "match"}],
        })
        assert response.status_code == 422
        assert "vintage_year" in response.json()["detail"]

    def test_needs_correction_not_a_resolution(self, client):
        response = client.post("/api/v1/review", json={
            "beverage_type": "wine",
            "verdicts": [{"field_name": "brand_name", "status": "match"}],
            "overrides": [{"field_name": "brand_name", "resolved_status": "needs_correction"}],
        })
        assert response.status_code == 422


class TestDeadlineEndpoint:

    def test_expired_correction(self, client):
        data = client.post("/api/v1/deadlines/effective-status", json={
            "status": "needs_correction",
            "correction_deadline": "2026-03-01T00:00:00Z",
            "now": "2026-03-02T00:00:00Z",
        }).json()
        assert data["effective_status"] == "rejected"
        assert data["urgency"] == "expired"

    def test_amber(self, client):
        data = client.post("/api/v1/deadlines/effective-status", json={
            "status": "conditionally_approved",
            "correction_deadline": "2026-03-05T00:00:00",
            "now": "2026-03-01T00:00:00",
        }).json()
        assert data["effective_status"] == "conditionally_approved"
        assert data["days_remaining"] == 4
        assert data["urgency"] == "amber"


class TestBatchEndpoints:
    """Test /verify/batch and /applications/csv."""

    def test_verify_batch(self, client, verify_payload):
        bad = dict(verify_payload, submission_id="bad", beverage_type="cider")
        good = dict(verify_payload, submission_id="good")
        response = client.post("/api/v1/verify/batch", json={"submissions": [good, bad]})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["failed"] == 1
        assert data["status_counts"] == {"approved": 1}
        assert data["results"][0]["result"]["status"] == "approved"
        assert data["results"][1]["success"] is False

    def test_csv_upload(self, client):
        csv_content = b"Brand Name,Type of Product,Container Size (mL)\nOld Tom,spirits,750\n,wine,750\n"
        response = client.post(
            "/api/v1/applications/csv",
            files={"csv_file": ("applications.csv", csv_content, "text/csv")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["rows"][0]["beverage_type"] == "distilled_spirits"
        assert data["errors"][0]["row_number"] == 3

    def test_csv_requires_file(self, client):
        assert client.post("/api/v1/applications/csv").status_code == 422

    def test_csv_must_be_utf8(self, client):
        response = client.post(
            "/api/v1/applications/csv",
            files={"csv_file": ("applications.csv", b"\xff\xfe\x00bad", "text/csv")},
        )
        assert response.status_code == 400
