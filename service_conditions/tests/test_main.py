"""
Unit tests for the Conditions service API.
"""

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from service_conditions.app.main import ConditionsService, create_app
from shared.test_helpers import create_mock_product_context, create_mock_seller, create_mock_condition


class TestConditionsService:
    """Test cases for ConditionsService."""

    @pytest.fixture
    def app(self):
        """Create FastAPI app instance."""
        return create_app()

    @pytest.fixture
    def client(self, app):
        """Create test client."""
        return TestClient(app)

    @pytest.fixture
    def evaluate_request(self):
        """Evaluation request for an available, discounted product."""
        return {
            "context": create_mock_product_context(
                product_id=123,
                clusters=["140"],
                sellers=[create_mock_seller("1", list_price=100, price=80, seller_default=True)],
            ),
            "conditions": [
                create_mock_condition("productId", id="123"),
                create_mock_condition("productClusters", id="140"),
                create_mock_condition("hasBestPrice"),
            ],
            "matchType": "all",
            "then": {"block": "flag-discount"},
            "else": {"block": "flag-regular"},
        }

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "conditions"
        assert data["version"] == "1.0.0"

    def test_health_check(self, client):
        """Test health check endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "conditions"
        assert data["status"] == "ok"

    def test_request_id_header(self, client):
        response = client.get("/", headers={"x-request-id": "req-1"})

        assert response.headers["x-request-id"] == "req-1"

    def test_get_handlers(self, client):
        response = client.get("/conditions/handlers")

        assert response.status_code == 200
        data = response.json()
        assert len(data["handlers"]) == 13
        assert data["match_types"] == ["all", "any"]
        assert data["default_match_type"] == "all"

    def test_evaluate_then_branch(self, client, evaluate_request):
        response = client.post("/conditions/evaluate", json=evaluate_request)

        assert response.status_code == 200
        data = response.json()
        assert data["ready"] is True
        assert data["result"] is True
        assert data["branch"] == "then"
        assert data["content"] == {"block": "flag-discount"}
        assert data["matchType"] == "all"
        assert data["explanation"] is None

    def test_evaluate_else_branch(self, client, evaluate_request):
        evaluate_request["conditions"].append(create_mock_condition("sellerId", ids=["99"]))

        response = client.post("/conditions/evaluate", json=evaluate_request)

        data = response.json()
        assert data["result"] is False
        assert data["branch"] == "else"
        assert data["content"] == {"block": "flag-regular"}

    def test_evaluate_any(self, client, evaluate_request):
        evaluate_request["matchType"] = "any"
        evaluate_request["conditions"] = [
            create_mock_condition("brandId", id="1"),
            create_mock_condition("isProductAvailable"),
        ]

        response = client.post("/conditions/evaluate", json=evaluate_request)

        assert response.json()["branch"] == "then"

    def test_evaluate_default_match_type(self, client, evaluate_request):
        del evaluate_request["matchType"]

        response = client.post("/conditions/evaluate", json=evaluate_request)

        assert response.json()["matchType"] == "all"

    def test_evaluate_not_ready(self, client, evaluate_request):
        evaluate_request["context"]["selectedItem"]["itemId"] = None

        response = client.post("/conditions/evaluate", json=evaluate_request)

        assert response.status_code == 200
        data = response.json()
        assert data["ready"] is False
        assert data["result"] is None
        assert data["branch"] is None
        assert data["content"] is None

    def test_evaluate_explain(self, client, evaluate_request):
        evaluate_request["conditions"].append(create_mock_condition("areAllVariationsSelected"))

        response = client.post("/conditions/evaluate?explain=true", json=evaluate_request)

        explanation = response.json()["explanation"]
        assert explanation["result"] is False
        assert explanation["matchedConditions"] == ["productId", "productClusters", "hasBestPrice"]
        assert explanation["failedConditions"] == ["areAllVariationsSelected"]

    def test_evaluate_unknown_key(self, client, evaluate_request):
        evaluate_request["conditions"].append({"key": "productColor", "args": {"id": "red"}})

        response = client.post("/conditions/evaluate", json=evaluate_request)

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "UNKNOWN_CONDITION_KEY"
        assert data["details"]["key"] == "productColor"

    def test_evaluate_malformed_args(self, client, evaluate_request):
        evaluate_request["conditions"] = [{"key": "hasMoreSellersThan", "args": {}}]

        response = client.post("/conditions/evaluate", json=evaluate_request)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_validate_conditions(self, client):
        response = client.post("/conditions/validate", json={
            "conditions": [
                create_mock_condition("sellerId", ids=["1", "2"]),
                create_mock_condition("hasBestPrice", value=False),
                create_mock_condition("isProductAvailable"),
            ]
        })

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["conditions"] == [
            {"key": "sellerId", "args": {"ids": ["1", "2"]}},
            {"key": "hasBestPrice", "args": {"value": False}},
            {"key": "isProductAvailable"},
        ]

    def test_validate_unknown_key(self, client):
        response = client.post("/conditions/validate", json={
            "conditions": [{"key": "productColor"}]
        })

        assert response.status_code == 400
        assert response.json()["code"] == "UNKNOWN_CONDITION_KEY"

    def test_evaluation_metrics(self, client, evaluate_request):
        client.post("/conditions/evaluate", json=evaluate_request)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert 'condition_evaluations_total{match_type="all",result="true"} 1.0' in response.text

    def test_default_match_type_from_environment(self, monkeypatch):
        monkeypatch.setenv("CONDITIONS_DEFAULT_MATCH_TYPE", "any")

        service = ConditionsService()

        assert service.default_match_type.value == "any"

    def test_default_match_type_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("CONDITIONS_DEFAULT_MATCH_TYPE", "ALL")

        service = ConditionsService()

        assert service.config.default_match_type == "all"
        assert service.default_match_type.value == "all"

    def test_invalid_default_match_type(self, monkeypatch):
        monkeypatch.setenv("CONDITIONS_DEFAULT_MATCH_TYPE", "most")

        with pytest.raises(ValidationError):
            ConditionsService()
