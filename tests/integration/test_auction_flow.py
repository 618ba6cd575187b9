"""Integration tests for the auction lifecycle: list → bid → expire → settle.

Run: pytest tests/integration -v
Pre-condition: PostgreSQL running and `alembic upgrade head` applied.
Category 1 comes from the seed rows in 002_create_categories.
"""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from helpers import ADMIN_USERNAME, register_and_login

pytestmark = [pytest.mark.asyncio(loop_scope="session"), pytest.mark.integration]


async def _create_listing(
    client: AsyncClient, headers: dict[str, str], price: int, ends_in: timedelta
) -> str:
    resp = await client.post(
        "/api/v1/listings",
        headers=headers,
        json={
            "title": "Integration lamp",
            "category_id": 1,
            "starting_price_cents": price,
            "end_time": (datetime.now(UTC) + ends_in).isoformat(),
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["listing_id"]


async def _sweep(client: AsyncClient) -> dict[str, object]:
    admin = await register_and_login(client, ADMIN_USERNAME)
    with patch("src.auc_gateway.auth.dependencies.settings.ADMIN_USERNAMES", [ADMIN_USERNAME]):
        resp = await client.post("/api/v1/admin/settlement/sweep", headers=admin)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


class TestBidding:
    async def test_bid_rules(self, client: AsyncClient) -> None:
        seller = await register_and_login(client, "seller")
        bidder = await register_and_login(client, "bidder")
        listing_id = await _create_listing(client, seller, 10_000, timedelta(hours=1))

        low = await client.post("/api/v1/bids", headers=bidder,
                                json={"listing_id": listing_id, "amount_cents": 9_000})
        assert low.json()["code"] == 3002

        own = await client.post("/api/v1/bids", headers=seller,
                                json={"listing_id": listing_id, "amount_cents": 15_000})
        assert own.json()["code"] == 3003

        ok = await client.post("/api/v1/bids", headers=bidder,
                               json={"listing_id": listing_id, "amount_cents": 15_000})
        assert ok.status_code == 201

        detail = await client.get(f"/api/v1/listings/{listing_id}")
        data = detail.json()["data"]
        assert data["listing"]["current_price_cents"] == 15_000
        assert [b["amount_cents"] for b in data["bids"]] == [15_000]

    async def test_concurrent_increasing_bids(self, client: AsyncClient) -> None:
        seller = await register_and_login(client, "seller")
        bidder = await register_and_login(client, "bidder")
        listing_id = await _create_listing(client, seller, 1_000, timedelta(hours=1))
        amounts = [1_000 + 100 * i for i in range(1, 11)]

        results = await asyncio.gather(*(
            client.post("/api/v1/bids", headers=bidder,
                        json={"listing_id": listing_id, "amount_cents": amt})
            for amt in amounts
        ))
        # Every request either lands or loses to a higher concurrent bid
        assert all(r.status_code in (201, 422) for r in results)
        detail = await client.get(f"/api/v1/listings/{listing_id}")
        data = detail.json()["data"]
        assert data["listing"]["current_price_cents"] == max(amounts)
        history = [b["amount_cents"] for b in data["bids"]]
        assert history == sorted(history, reverse=True)


class TestSettlement:
    async def test_expire_and_sell(self, client: AsyncClient) -> None:
        seller = await register_and_login(client, "seller")
        bidder = await register_and_login(client, "bidder")
        unsold = await _create_listing(client, seller, 10_000, timedelta(seconds=2))
        sold = await _create_listing(client, seller, 10_000, timedelta(seconds=2))
        await client.post("/api/v1/bids", headers=bidder,
                          json={"listing_id": sold, "amount_cents": 15_000})

        await asyncio.sleep(2.5)
        await _sweep(client)

        unsold_detail = (await client.get(f"/api/v1/listings/{unsold}")).json()["data"]
        assert unsold_detail["listing"]["status"] == "expired"
        assert unsold_detail["sale"] is None

        sold_detail = (await client.get(f"/api/v1/listings/{sold}")).json()["data"]
        assert sold_detail["listing"]["status"] == "sold"
        assert sold_detail["sale"]["amount_cents"] == 15_000

        my_bids = (await client.get("/api/v1/me/bids", headers=bidder)).json()["data"]["items"]
        assert [b["bid_state"] for b in my_bids if b["listing_id"] == sold] == ["WON"]

        late = await client.post("/api/v1/bids", headers=bidder,
                                 json={"listing_id": sold, "amount_cents": 20_000})
        assert late.json()["code"] == 3001

    async def test_sweep_is_idempotent_and_ledger_consistent(self, client: AsyncClient) -> None:
        await _sweep(client)
        second = await _sweep(client)
        assert second["sold"] == 0
        assert second["expired"] == 0

        admin = await register_and_login(client, ADMIN_USERNAME)
        with patch("src.auc_gateway.auth.dependencies.settings.ADMIN_USERNAMES", [ADMIN_USERNAME]):
            resp = await client.get("/api/v1/admin/settlement/invariants", headers=admin)
        assert resp.json()["data"] == {"ok": True, "violations": []}
