"""Pytest configuration and fixtures."""

import os
from datetime import datetime

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Isolate environment variables for each test.

    Search history and configuration discovery are pointed at a temporary
    directory so tests never touch the user's files.
    """
    original_env = os.environ.copy()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    for name in list(os.environ):
        if name.startswith("RECORDQUERY_"):
            monkeypatch.delenv(name)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def driver_records():
    """Driver records as decoded from the dashboard API."""
    return [
        {
            "id": "DRV-0001",
            "first_name": "Rosa",
            "paternal_surname": "Martínez",
            "maternal_surname": "Salinas",
            "curp": "MASR880322MNLRLS05",
            "email": "rosa.martinez@example.com",
            "phone": "8112345678",
            "state": "Nuevo León",
            "status": "Active",
            "last_store": "Monterrey Centro",
            "last_order_at": datetime(2024, 1, 10, 18, 30),
        },
        {
            "id": "DRV-0002",
            "first_name": "Gabriel",
            "paternal_surname": "López",
            "maternal_surname": "García",
            "curp": "LOGA900101HCLPRB02",
            "email": "gabriel.lopez@example.com",
            "phone": "8441234567",
            "state": "Coahuila",
            "status": "Inactive",
            "last_store": "Saltillo Norte",
            "last_order_at": datetime(2023, 12, 2, 9, 0),
        },
        {
            "id": "DRV-0003",
            "first_name": "José",
            "paternal_surname": "Hernández",
            "maternal_surname": "Ruiz",
            "curp": "HERJ850715HDGRZS09",
            "email": "jose.hernandez@example.com",
            "phone": "6181234567",
            "state": "Durango",
            "status": "Active",
            "last_store": "Monterrey Sur",
            "last_order_at": datetime(2024, 2, 20, 12, 15),
        },
        {
            "id": "DRV-0004",
            "first_name": "Ana",
            "paternal_surname": "Martínez",
            "maternal_surname": "Ochoa",
            "curp": "MAOA920208MNLRCN01",
            "email": "ana.martinez@example.com",
            "phone": "8187654321",
            "state": "Nuevo León",
            "status": "Suspended",
            "last_store": "Monterrey Centro",
            "last_order_at": None,
        },
    ]


@pytest.fixture
def complaint_records():
    """Complaint records with ISO timestamps, as stored on disk."""
    return [
        {
            "id": "QJ-0001",
            "driver_id": "DRV-0001",
            "driver_name": "Rosa Martínez Salinas",
            "driver_rfc": "MASR880322AB1",
            "driver_email": "rosa.martinez@example.com",
            "type": "Complaint",
            "received_at": "2024-01-08T10:00:00",
            "updated_at": "2024-01-10T23:59:00",
            "status": "Open",
        },
        {
            "id": "QJ-0002",
            "driver_id": "DRV-0002",
            "driver_name": "Gabriel López García",
            "driver_rfc": "LOGA900101CD2",
            "driver_email": "gabriel.lopez@example.com",
            "type": "Clarification",
            "received_at": "2024-01-09T08:30:00",
            "updated_at": "2024-01-11T00:00:01",
            "status": "Resolved",
        },
        {
            "id": "QJ-0003",
            "driver_id": "DRV-0003",
            "driver_name": "José Hernández Ruiz",
            "driver_rfc": "HERJ850715EF3",
            "driver_email": "jose.hernandez@example.com",
            "type": "Comment",
            "received_at": "2024-01-05T16:45:00",
            "updated_at": "2024-01-06T09:00:00",
            "status": "Open",
        },
    ]
