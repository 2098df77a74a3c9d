"""
Pytest configuration and shared fixtures for pos-admin tests.

Tests stay offline: the backend is a ``requests.Session`` mock returning
real ``requests.Response`` objects.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict
from unittest.mock import MagicMock

import jwt
import pytest
import requests

sys.path.insert(0, str(Path(__file__).parent.parent))

from pos_admin.api_client import ApiClient  # noqa: E402

BASE_URL = "http://pos.test"
SIGNING_KEY = "test-signing-key-that-is-long-enough-for-hs256"


def make_response(
    status: int = 200,
    body: Any = None,
    *,
    content: bytes | None = None,
    url: str = f"{BASE_URL}/",
) -> requests.Response:
    """Build a real Response so .ok/.json()/.content behave like the wire."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = content or b""
    return response


def envelope(data: Any, status: int = 200, message: str = "OK") -> Dict[str, Any]:
    return {
        "success": 200 <= status < 300,
        "statusCode": status,
        "message": message,
        "data": data,
        "timestamp": "2026-01-15T08:00:00.000Z",
    }


def make_token(**claims: Any) -> str:
    return jwt.encode(claims, SIGNING_KEY, algorithm="HS256")


@pytest.fixture
def http_session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(200, envelope([]))
    return session


@pytest.fixture
def client(http_session: MagicMock) -> ApiClient:
    return ApiClient(BASE_URL, token_provider=lambda: "tok-123", session=http_session, timeout=5)


@pytest.fixture
def admin_user() -> Dict[str, Any]:
    return {"id": 1, "email": "admin@pos.com", "name": "Budi Admin", "role": "ADMIN"}


@pytest.fixture
def cashier_user() -> Dict[str, Any]:
    return {"id": 7, "email": "kasir@pos.com", "name": "Sari", "role": "KASIR"}


@pytest.fixture
def sample_products() -> list[Dict[str, Any]]:
    return [
        {
            "id": 1,
            "name": "Es Teh Manis",
            "description": "Teh melati dingin",
            "price": "5000.00",
            "stock": 120,
            "categoryId": 2,
            "imageUrl": "/uploads/es-teh.jpg",
            "status": "AVAILABLE",
            "category": {"id": 2, "name": "Minuman"},
        },
        {
            "id": 2,
            "name": "Nasi Goreng Spesial",
            "price": 25000,
            "stock": 30,
            "categoryId": 1,
            "category": {"id": 1, "name": "Makanan"},
        },
        {
            "id": 3,
            "name": "Kopi Susu",
            "price": 18000,
            "stock": 0,
            "categoryId": 2,
            "status": "OUT_OF_STOCK",
            "category": {"id": 2, "name": "Minuman"},
        },
    ]


@pytest.fixture
def sample_report() -> Dict[str, Any]:
    return {
        "summary": {"totalRevenue": 1250000, "totalTransactions": 48, "averageTransactionValue": 26041.67},
        "bestSellers": [
            {"productName": "Kopi Susu", "quantitySold": 40, "revenue": 720000},
            {"productName": "Es Teh Manis", "quantitySold": 30, "revenue": 150000},
            {"productName": "Nasi Goreng Spesial", "quantitySold": 10, "revenue": 250000},
        ],
        "revenueByPaymentMethod": {"CASH": 800000, "QRIS": 450000},
        "transactions": [
            {
                "id": 991,
                "transactionNumber": "TRX-20260115-001",
                "createdAt": "2026-01-15T03:12:00.000Z",
                "cashier": "Sari",
                "paymentMethod": "CASH",
                "itemCount": 3,
                "totalAmount": 43000,
            }
        ],
    }
