import pytest
from consulting.api import admin_router, booking_router, category_router, consultant_router, service_router
from consulting.api.errors import register_exception_handlers
from fastapi import FastAPI
from fastapi.testclient import TestClient

BIO = (
    "Operations consultant who has rebuilt supply chains for retailers "
    "across Europe and North America."
)

_ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}
_CONSULTANT = {"X-User-Id": "consultant-user", "X-User-Role": "consultant"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(category_router)
    app.include_router(consultant_router)
    app.include_router(booking_router)
    app.include_router(admin_router)
    app.include_router(service_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def category_id(client):
    response = client.post(
        "/categories",
        json={"name": "operations", "description": "Supply chain and process design.", "icon": "gear"},
        headers=_ADMIN,
    )
    assert response.status_code == 201
    return response.json()["data"]["category"]["id"]


@pytest.fixture()
def consultant_id(client, category_id):
    response = client.post(
        "/consultants",
        json={
            "categories": [category_id],
            "bio": BIO,
            "experience": 10,
            "hourlyRate": 100,
            "languages": ["English", "German"],
            "availability": {"monday": {"isAvailable": True, "startTime": "09:00", "endTime": "17:00"}},
        },
        headers=_CONSULTANT,
    )
    assert response.status_code == 201
    return response.json()["data"]["consultant"]["id"]
