"""Shared helpers for integration tests."""

import uuid

from httpx import AsyncClient

ADMIN_USERNAME = f"admin_{uuid.uuid4().hex[:8]}"


async def register_and_login(client: AsyncClient, prefix: str) -> dict[str, str]:
    """Register a fresh user and return auth headers."""
    uid = uuid.uuid4().hex[:8]
    username = prefix if prefix == ADMIN_USERNAME else f"{prefix}_{uid}"
    creds = {
        "username": username,
        "email": f"{username}@example.com",
        "password": "TestPass123!",
    }
    await client.post("/api/v1/auth/register", json=creds)
    resp = await client.post(
        "/api/v1/auth/login",
        json={"username": creds["username"], "password": creds["password"]},
    )
    token = resp.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}
