"""Tests for the HTTP API using FastAPI's TestClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import structlog
from fastapi.testclient import TestClient

from savings_service.api.app import create_app
from savings_service.application.services import SavingsAccountService
from savings_service.domain.exceptions import DataIntegrityViolationError, QueryTimeoutError
from savings_service.domain.models import AccountNumber, SavingsAccount
from savings_service.infrastructure.repositories.memory import InMemoryAccountRepository


@pytest.fixture
def client(memory_service: SavingsAccountService) -> TestClient:
    """Client over the in-memory service holding 1-234-567-890 with $0.00."""
    return TestClient(create_app(memory_service))


@pytest.fixture
def failing_repository() -> AsyncMock:
    repo = AsyncMock()
    repo.find_by_number = AsyncMock(side_effect=QueryTimeoutError("Query timed out!"))
    repo.save = AsyncMock(return_value=None)
    return repo


class TestSaveMoney:
    """Tests for PUT /accounts/save."""

    def test_save_money(self, client: TestClient) -> None:
        response = client.put("/accounts/save", json={"accountNumber": "1-234-567-890", "amount": 100})

        assert response.status_code == 200
        assert response.json() == {"accountNumber": "1-234-567-890", "balance": 100.0}

    def test_negative_amount(self, client: TestClient) -> None:
        """Non-positive amounts are rejected before reaching the service."""
        response = client.put("/accounts/save", json={"accountNumber": "1-234-567-890", "amount": -100})

        assert response.status_code == 400
        assert response.json()["messages"][0] == "The amount must be > 0: -100.0"

    def test_null_account_number(self, client: TestClient) -> None:
        response = client.put("/accounts/save", json={"accountNumber": None, "amount": 100})

        assert response.status_code == 400
        assert response.json()["messages"][0] == "The account number must not be null"

    def test_missing_account_number(self, client: TestClient) -> None:
        response = client.put("/accounts/save", json={"amount": 100})

        assert response.status_code == 400
        assert response.json()["messages"][0] == "The account number must not be null"

    @pytest.mark.parametrize("amount", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_amount(self, client: TestClient, amount: str) -> None:
        """Non-finite JSON numbers are rejected and leave the balance untouched."""
        for path in ("/accounts/save", "/accounts/withdraw"):
            response = client.put(
                path,
                content=f'{{"accountNumber": "1-234-567-890", "amount": {amount}}}',
                headers={"Content-Type": "application/json"},
            )

            assert response.status_code == 400

        assert client.get("/accounts/1-234-567-890").json()["balance"] == 0.0

    def test_malformed_account_number(self, client: TestClient) -> None:
        response = client.put("/accounts/save", json={"accountNumber": "12-34", "amount": 100})

        assert response.status_code == 400
        assert response.json()["messages"] == ["Invalid savings account number format: 12-34"]

    def test_unknown_account(self, client: TestClient) -> None:
        response = client.put("/accounts/save", json={"accountNumber": "9-999-999-999", "amount": 100})

        assert response.status_code == 404
        assert response.json() == {"messages": ["The bank account number '9-999-999-999' does not exist!"]}


class TestWithdrawMoney:
    """Tests for PUT /accounts/withdraw."""

    def test_save_save_withdraw_overdraw_scenario(self, client: TestClient) -> None:
        """Deposit 100 and 75, withdraw 50, then fail to withdraw 200."""
        client.put("/accounts/save", json={"accountNumber": "1-234-567-890", "amount": 100})
        client.put("/accounts/save", json={"accountNumber": "1-234-567-890", "amount": 75})

        response = client.put("/accounts/withdraw", json={"accountNumber": "1-234-567-890", "amount": 50})
        assert response.status_code == 200
        assert response.json() == {"accountNumber": "1-234-567-890", "balance": 125.0}

        response = client.put("/accounts/withdraw", json={"accountNumber": "1-234-567-890", "amount": 200})
        assert response.status_code == 400
        assert response.json()["messages"] == [
            "The bank account 1-234-567-890 has a balance of $125.00. "
            "Therefore you cannot withdraw $200.00 since you're short $75.00"
        ]

        assert client.get("/accounts/1-234-567-890").json()["balance"] == 125.0

    def test_insufficient_funds_on_empty_account(self, client: TestClient) -> None:
        response = client.put("/accounts/withdraw", json={"accountNumber": "1-234-567-890", "amount": 1})

        assert response.status_code == 400

    def test_zero_amount(self, client: TestClient) -> None:
        response = client.put("/accounts/withdraw", json={"accountNumber": "1-234-567-890", "amount": 0})

        assert response.status_code == 400
        assert response.json()["messages"] == ["The amount must be > 0: 0.0"]

    def test_unknown_account(self, client: TestClient) -> None:
        response = client.put("/accounts/withdraw", json={"accountNumber": "9-999-999-999", "amount": 100})

        assert response.status_code == 404

    def test_transient_failure_returns_503(self, failing_repository: AsyncMock) -> None:
        """Retries exhausted on a transient failure ask the client to come back."""
        client = TestClient(create_app(SavingsAccountService(failing_repository, max_attempts=3)))

        response = client.put("/accounts/withdraw", json={"accountNumber": "1-234-567-890", "amount": 10})

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "5000"
        assert response.json() == {"messages": ["Failure to execute operation on account '1-234-567-890'"]}
        assert failing_repository.find_by_number.await_count == 3

    def test_retry_after_from_app_settings(self, failing_repository: AsyncMock) -> None:
        client = TestClient(create_app(SavingsAccountService(failing_repository), retry_after=1000))

        response = client.put("/accounts/withdraw", json={"accountNumber": "1-234-567-890", "amount": 10})

        assert response.headers["Retry-After"] == "1000"

    def test_transient_failure_recovers(self, account_number: AccountNumber) -> None:
        """Two transient failures are invisible to the client."""
        repo = AsyncMock()
        repo.find_by_number = AsyncMock(
            side_effect=[
                QueryTimeoutError("Query timed out!"),
                QueryTimeoutError("Query timed out!"),
                SavingsAccount(account_number, 100.0),
            ]
        )
        repo.save = AsyncMock(return_value=None)
        client = TestClient(create_app(SavingsAccountService(repo, max_attempts=3)))

        response = client.put("/accounts/withdraw", json={"accountNumber": "1-234-567-890", "amount": 10})

        assert response.status_code == 200
        assert response.json()["balance"] == 90.0

    def test_persistent_failure_returns_500(self, mock_account_repository: AsyncMock) -> None:
        mock_account_repository.find_by_number.side_effect = DataIntegrityViolationError("constraint")
        client = TestClient(create_app(SavingsAccountService(mock_account_repository)))

        response = client.put("/accounts/withdraw", json={"accountNumber": "1-234-567-890", "amount": 10})

        assert response.status_code == 500
        assert "Retry-After" not in response.headers
        assert response.json() == {"messages": ["Failure to execute operation on account '1-234-567-890'"]}


class TestGetBalance:
    """Tests for GET /accounts/{account_number}."""

    def test_get_balance(self, client: TestClient) -> None:
        response = client.get("/accounts/1-234-567-890")

        assert response.status_code == 200
        assert response.json() == {"accountNumber": "1-234-567-890", "balance": 0.0}

    def test_unknown_account(self, client: TestClient) -> None:
        response = client.get("/accounts/9-999-999-999")

        assert response.status_code == 404
        assert response.json()["messages"] == ["The bank account number '9-999-999-999' does not exist!"]

    def test_malformed_account_number(self, client: TestClient) -> None:
        response = client.get("/accounts/12345")

        assert response.status_code == 400
        assert response.json()["messages"] == ["Invalid savings account number format: 12345"]


class TestUnexpectedErrors:
    """Tests for errors the service does not anticipate."""

    def test_generic_500(self) -> None:
        """Unexpected errors return a generic message."""
        service = AsyncMock(spec=SavingsAccountService)
        service.get_balance.side_effect = RuntimeError("password=hunter2")
        client = TestClient(create_app(service), raise_server_exceptions=False)

        response = client.get("/accounts/1-234-567-890")

        assert response.status_code == 500
        assert response.json() == {"messages": ["Internal server error"]}


class TestOperationalEndpoints:
    """Tests for /health and /metrics."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_metrics_disabled(self) -> None:
        service = SavingsAccountService(InMemoryAccountRepository())
        client = TestClient(create_app(service, metrics_enabled=False))

        assert client.get("/metrics").status_code == 404
        assert client.get("/health").status_code == 200


class TestRequestContext:
    """Tests for request id propagation."""

    def test_generates_request_id(self, client: TestClient) -> None:
        response = client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 32

    def test_echoes_request_id(self, client: TestClient) -> None:
        response = client.get("/accounts/1-234-567-890", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_unhandled_error_is_logged_with_request_id(self) -> None:
        """The server-error handler still sees the request id bound for the request."""
        service = AsyncMock(spec=SavingsAccountService)
        service.get_balance.side_effect = RuntimeError("boom")
        client = TestClient(create_app(service), raise_server_exceptions=False)
        logged_context: dict[str, object] = {}

        def capture_bind(**kwargs: object) -> MagicMock:
            logged_context.update(structlog.contextvars.get_contextvars())
            return MagicMock()

        with patch("savings_service.api.errors.logger") as mock_logger:
            mock_logger.bind.side_effect = capture_bind
            response = client.get("/accounts/1-234-567-890", headers={"X-Request-ID": "req-42"})

        assert response.status_code == 500
        assert logged_context["request_id"] == "req-42"
