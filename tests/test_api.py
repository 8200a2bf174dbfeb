"""Tests for the schema router."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from graphaugment import SchemaValidationError
from graphaugment.api import create_schema_router


@pytest.fixture
def client(movie_type_defs):
    app = FastAPI()
    app.include_router(create_schema_router(movie_type_defs))
    return TestClient(app)


class TestSchemaEndpoints:

    def test_schema_is_plain_text(self, client) -> None:
        response = client.get("/__schema")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "type MoviesConnection" in response.text

    def test_resolvers(self, client) -> None:
        response = client.get("/__resolvers")

        assert response.status_code == 200
        data = response.json()
        assert "movies" in data["Query"]
        assert "createMovies" in data["Mutation"]

    def test_invalid_type_defs_fail_at_creation(self) -> None:
        with pytest.raises(SchemaValidationError):
            create_schema_router("type Movie @node @limit(default: 0) { title: String }")


class TestValidateEndpoint:

    def test_valid_schema(self, client, movie_type_defs) -> None:
        response = client.post("/validate", content=movie_type_defs)

        assert response.json() == {"valid": True, "errors": []}

    def test_invalid_schema(self, client) -> None:
        response = client.post("/validate", content="type Movie @node { id: String @id }")

        data = response.json()
        assert data["valid"] is False
        assert data["errors"] == [{"message": "Cannot autogenerate a non ID field.", "path": ["Movie", "id", "@id"]}]

    def test_syntax_error(self, client) -> None:
        response = client.post("/validate", content="type Movie {")

        data = response.json()
        assert data["valid"] is False
        assert data["errors"][0]["path"] is None

    def test_body_that_is_not_utf8(self, client) -> None:
        response = client.post("/validate", content=b"type A @node { a: String } \xff")

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["errors"][0]["message"].startswith("Request body is not valid UTF-8")
        assert data["errors"][0]["path"] is None
