"""Pytest configuration and shared test fixtures.

This module provides fixtures for testing the certification irregularity
engine, including record/type factories and fake async sources and write
executors for the review session.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from cert_irregularity.config import DetectionConfig, RefreshConfig
from cert_irregularity.models import CertificationRecord, CertificationType

# =============================================================================
# MODEL FACTORIES
# =============================================================================


@pytest.fixture
def make_record() -> Callable[..., CertificationRecord]:
    """Provide a factory for certification records.

    Returns:
        Callable building a CertificationRecord with sensible defaults.
    """

    def _make(
        record_id: str,
        name: str,
        function: str = "Cloud",
        owner_id: str = "u1",
        **extra: Any,
    ) -> CertificationRecord:
        return CertificationRecord(
            id=record_id, name=name, function=function, owner_id=owner_id, **extra
        )

    return _make


@pytest.fixture
def make_type() -> Callable[..., CertificationType]:
    """Provide a factory for catalog types.

    Returns:
        Callable building a CertificationType with sensible defaults.
    """

    def _make(
        type_id: str,
        name: str,
        full_name: str,
        function: str = "",
        platform_id: str = "p1",
        aliases: tuple[str, ...] = (),
        is_active: bool = True,
    ) -> CertificationType:
        return CertificationType(
            id=type_id,
            platform_id=platform_id,
            name=name,
            full_name=full_name,
            function=function,
            aliases=aliases,
            is_active=is_active,
        )

    return _make


# =============================================================================
# SAMPLE DATA
# =============================================================================


@pytest.fixture
def sample_raw_records() -> list[dict[str, Any]]:
    """Provide raw records in the dashboard's camelCase shape.

    Contains one exact pair, one similar pair and one function mismatch,
    all for the same owner, plus an unrelated record of another owner.
    """
    return [
        {"id": "1", "name": "Azure Admin", "function": "Infra", "ownerId": "u1"},
        {"id": "2", "name": "Azure Admin", "function": "Infra", "ownerId": "u1"},
        {"id": "3", "name": "GCP Architect", "function": "Cloud", "ownerId": "u1"},
        {"id": "4", "name": "GCP Architecte", "function": "Cloud", "ownerId": "u1"},
        {"id": "5", "name": "PMP", "function": "Management", "ownerId": "u1"},
        {"id": "6", "name": "PMP", "function": "Leadership", "ownerId": "u1"},
        {"id": "7", "name": "Azure Admin", "function": "Infra", "ownerId": "u2"},
    ]


@pytest.fixture
def sample_raw_types() -> list[dict[str, Any]]:
    """Provide raw catalog types, including one duplicate pair."""
    return [
        {
            "id": "a",
            "platformId": "p1",
            "name": "SA",
            "fullName": "Solutions Architect Pro",
            "aliases": ["SAP"],
        },
        {
            "id": "b",
            "platformId": "p1",
            "name": "SA",
            "fullName": "Solutions Architect Proo",
            "aliases": [],
        },
        {
            "id": "az",
            "platformId": "p2",
            "name": "AZ-104",
            "fullName": "Azure Administrator",
            "function": "Infra",
            "aliases": ["Azure Admin"],
        },
    ]


# =============================================================================
# CONFIGURATION
# =============================================================================


@pytest.fixture
def detection_config() -> DetectionConfig:
    """Provide default detection thresholds."""
    return DetectionConfig()


@pytest.fixture
def fast_refresh_config() -> RefreshConfig:
    """Provide a refresh configuration with a short debounce for tests."""
    return RefreshConfig(debounce_seconds=0.01, source_retry_attempts=2)


# =============================================================================
# FAKE SOURCES AND EXECUTOR
# =============================================================================


@pytest.fixture
def record_source(sample_raw_records: list[dict[str, Any]]) -> AsyncMock:
    """Provide a mock record source returning the sample records."""
    source = AsyncMock()
    source.fetch_records.return_value = sample_raw_records
    return source


@pytest.fixture
def type_source(sample_raw_types: list[dict[str, Any]]) -> AsyncMock:
    """Provide a mock catalog source returning the sample types."""
    source = AsyncMock()
    source.fetch_types.return_value = sample_raw_types
    return source


@pytest.fixture
def executor() -> AsyncMock:
    """Provide a mock write executor that succeeds by default."""
    mock = AsyncMock()
    mock.apply_standardization.return_value = None
    mock.apply_consolidation.return_value = None
    mock.apply_merge.return_value = None
    return mock
