"""Tests for the HTTP endpoint."""

import pytest
from fastapi.testclient import TestClient

from symnorm import Simplifier
from symnorm.server import create_app, MULTIPLE_EXPRESSIONS


@pytest.fixture
def client():
    return TestClient(create_app())


class TestSimplifyEndpoint:
    """Tests for GET /simplify/{expression}."""

    def test_simplify(self, client):
        """Returns LaTeX and the numeric result."""
        response = client.get("/simplify/2*(3+4)")
        assert response.status_code == 200
        assert response.json() == {
            "simplified": "2 \\cdot 3 + 2 \\cdot 4",
            "result": "14.0",
        }

    def test_division_in_path(self, client):
        """Slashes are part of the expression."""
        response = client.get("/simplify/6/4")
        assert response.status_code == 200
        assert response.json() == {"simplified": "\\frac{6}{4}", "result": "1.5"}

    def test_whitespace(self, client):
        """Encoded spaces are ignored like any whitespace."""
        response = client.get("/simplify/1 + 1")
        assert response.status_code == 200
        assert response.json()["result"] == "2.0"

    def test_evaluation_error(self, client):
        """Evaluation failures are reported in the result field."""
        response = client.get("/simplify/5/0")
        assert response.status_code == 200
        assert response.json() == {
            "simplified": "\\frac{5}{0}",
            "result": "Error: Division by zero",
        }

    def test_variable(self, client):
        """Variables simplify but do not evaluate."""
        response = client.get("/simplify/x*(y+1)")
        assert response.status_code == 200
        assert response.json() == {
            "simplified": "x \\cdot y + x \\cdot 1",
            "result": "Error: Cannot evaluate variable x",
        }

    def test_multiple_expressions(self, client):
        """Equations are rejected."""
        response = client.get("/simplify/2+2=4")
        assert response.status_code == 400
        assert response.json() == {"error": MULTIPLE_EXPRESSIONS}

    def test_lex_error(self, client):
        """Invalid characters are a client error."""
        response = client.get("/simplify/2$3")
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid token")

    def test_parse_error(self, client):
        """Malformed expressions are a client error."""
        response = client.get("/simplify/(1+2")
        assert response.status_code == 400
        assert response.json() == {"error": "Unmatched '('"}

    def test_convergence_error(self):
        """Budget exhaustion is reported as unprocessable."""
        client = TestClient(create_app(Simplifier(max_sweeps=1)))
        response = client.get("/simplify/2*(3+4)")
        assert response.status_code == 422
        assert "No fixed point" in response.json()["error"]

    def test_long_sum(self, client):
        """Overly deep input is a client error, not a crash."""
        response = client.get("/simplify/" + "+".join(["1"] * 1500))
        assert response.status_code == 400
        assert response.json() == {"error": "Expression nested too deeply"}

    def test_small_number(self, client):
        """Small constants render in positional notation."""
        response = client.get("/simplify/0.0000001*x")
        assert response.status_code == 200
        assert response.json()["simplified"] == "0.0000001 \\cdot x"


class TestHealth:
    """Tests for the health check."""

    def test_health(self, client):
        """Health endpoint reports status and version."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": "0.1.0"}
