from fastapi.testclient import TestClient
from adboard.main import app
from adboard.core.exceptions import ExternalServiceError, LocationRequiredError

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"

def test_validation_error_structure():
    # Temporary route with a typed body
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert len(data["details"]) > 0

def test_custom_exception():
    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ExternalServiceError(message="Telegram API error: chat not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 502
    data = response.json()
    assert data["code"] == "EXTERNAL_SERVICE_ERROR"
    assert data["error"] == "Telegram API error: chat not found"

def test_location_required_exception():
    @app.get("/test-location-required")
    def trigger_location_required():
        raise LocationRequiredError(details={"user_id": 1})

    response = client.get("/test-location-required")
    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "LOCATION_REQUIRED"
    assert data["details"] == {"user_id": 1}

def test_unexpected_exception_is_wrapped():
    @app.get("/test-unexpected-error")
    def trigger_unexpected_error():
        raise RuntimeError("boom")

    response = TestClient(app, raise_server_exceptions=False).get("/test-unexpected-error")
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
