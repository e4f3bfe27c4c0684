"""API surface tests: health, authentication and error bodies."""


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_missing_api_key_is_unauthenticated(client):
    """Test requests without an API key are rejected."""
    response = client.get("/users")
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthenticated."}


def test_unknown_api_key_is_unauthenticated(client, admin):
    """Test requests with an API key nobody holds are rejected."""
    response = client.get("/users", headers={"X-Api-Key": "x" * 20})
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthenticated."}


def test_api_key_from_query_string(client, admin):
    """Test the API key can be passed as a query parameter."""
    response = client.get("/users", params={"api_key": admin.api_key})
    assert response.status_code == 200


def test_api_key_from_json_body(client, admin, user_payload):
    """Test the API key can be passed as a field of the JSON body."""
    response = client.post("/users", json={**user_payload, "api_key": admin.api_key})
    assert response.status_code == 201
    assert response.json()["data"]["email"] == user_payload["email"]


def test_header_takes_precedence_over_query(client, admin, regular_user):
    """Test the header key wins when both header and query string carry one."""
    response = client.get(
        "/users",
        headers={"X-Api-Key": regular_user.api_key},
        params={"api_key": admin.api_key},
    )
    assert response.status_code == 403


def test_unauthenticated_before_malformed_body(client):
    """Test authentication is checked before the body is parsed."""
    response = client.post(
        "/users", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 401


def test_malformed_json_body(client, admin):
    """Test an unparseable body is reported as a validation failure."""
    response = client.post(
        "/users",
        content=b"{not json",
        headers={"X-Api-Key": admin.api_key, "Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert response.json()["errors"] == {"body": ["The request body must be valid JSON."]}


def test_non_object_json_body(client, admin):
    """Test a JSON body that is not an object is rejected."""
    response = client.post("/users", json=["not", "an", "object"], headers={"X-Api-Key": admin.api_key})
    assert response.status_code == 422
    assert response.json()["errors"] == {"body": ["The request body must be a JSON object."]}


def test_unknown_route_uses_message_body(client):
    """Test routing errors share the message error body."""
    response = client.get("/nope")
    assert response.status_code == 404
    assert "message" in response.json()
