"""Fixtures for API route tests: a TestClient wired to in-memory services."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from safari_api.dependencies import (
    get_availability_service,
    get_cancellation_service,
    get_refund_policy_service,
)
from safari_api.main import app
from safari_shared.services.refund_policy_service import RefundPolicyService


@pytest.fixture
def client(
    availability_service, cancellation_service
) -> Generator[TestClient, None, None]:
    """Create test client for API with in-memory repositories."""
    app.dependency_overrides[get_availability_service] = lambda: availability_service
    app.dependency_overrides[get_cancellation_service] = lambda: cancellation_service
    app.dependency_overrides[get_refund_policy_service] = lambda: RefundPolicyService()
    yield TestClient(app)
    app.dependency_overrides.clear()
