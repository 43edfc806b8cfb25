import logging
import uuid

import pytest
import structlog

from config.settings import mask_sensitive_data
from modules.core.middleware import correlation_id_var, resolve_request_id


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/products", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid_when_no_request_id(self, client):
        response = client.get("/health")
        request_id = response["X-Request-ID"]
        parsed = uuid.UUID(request_id, version=4)
        assert str(parsed) == request_id

    @pytest.mark.parametrize(
        "bad_id",
        ["has space", "semi;colon", "x" * 129, "<script>"],
    )
    def test_malformed_request_id_is_replaced(self, client, bad_id):
        response = client.get("/health", HTTP_X_REQUEST_ID=bad_id)
        request_id = response["X-Request-ID"]
        assert request_id != bad_id
        assert str(uuid.UUID(request_id, version=4)) == request_id

    def test_resolve_request_id_keeps_token_at_max_length(self):
        token = "a" * 128
        assert resolve_request_id(token) == token

    def test_request_context_is_cleared_after_response(self, client):
        client.get("/health", HTTP_X_REQUEST_ID="ctx-check-1")
        assert structlog.contextvars.get_contextvars() == {}
        assert correlation_id_var.get() == ""

    def test_method_and_path_bound_to_request_logs(self, client, caplog):
        with caplog.at_level(logging.INFO):
            client.get("/products", HTTP_X_REQUEST_ID="bound-ctx-1")
        messages = [r.getMessage() for r in caplog.records if "bound-ctx-1" in r.getMessage()]
        assert any("request_finished" in m and "/products" in m and "GET" in m for m in messages)

    def test_correlation_id_in_logs(self, api_client_with_correlation, caplog):
        api_client, cid = api_client_with_correlation
        with caplog.at_level(logging.INFO):
            api_client.get("/products")
        found = any(cid in record.getMessage() for record in caplog.records)
        assert found, (
            f"correlation_id '{cid}' not found in log records: "
            f"{[r.getMessage() for r in caplog.records]}"
        )


class TestSensitiveDataMasking:
    def test_password_masked_in_log_output(self):
        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked_in_log_output(self):
        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert result["header"] == "token=***MASKED***"

    def test_non_sensitive_data_unchanged(self):
        event_dict = {"event": "product.created", "name": "Widget"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result == {"event": "product.created", "name": "Widget"}
