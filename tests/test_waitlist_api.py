"""Tests for the waitlist endpoints."""

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dytto_api.app.models.waitlist import WaitlistEntry
from tests.conftest import create_waitlist_entry


async def test_join_waitlist(client: AsyncClient):
    resp = await client.post("/waitlist", json={"email": "ada@example.com"})
    assert resp.status_code == 201
    body = resp.json()
    data = body["data"]
    assert data["email"] == "ada@example.com"
    assert data["source"] == "website"
    assert data["status"] == "pending"
    assert data["referred_by"] is None
    assert data["referral_count"] == 0
    assert data["metadata"] == {}
    assert len(data["referral_code"]) == 8
    assert body["position"] == data["position"] == 1


async def test_join_waitlist_positions_increase(client: AsyncClient, db: AsyncSession):
    await create_waitlist_entry(db, email="first@example.com", position=41)
    await db.commit()

    resp = await client.post(
        "/waitlist",
        json={"email": "next@example.com", "source": "landing-hero", "metadata": {"utm": "x"}},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["position"] == 42
    assert body["data"]["source"] == "landing-hero"
    assert body["data"]["metadata"] == {"utm": "x"}


async def test_join_waitlist_twice_returns_existing(client: AsyncClient, db: AsyncSession):
    first = await client.post("/waitlist", json={"email": "Ada@Example.com"})
    again = await client.post("/waitlist", json={"email": "ada@example.com", "source": "other"})

    assert again.status_code == 200
    assert again.json()["data"]["id"] == first.json()["data"]["id"]
    assert again.json()["data"]["source"] == "website"
    assert again.json()["position"] == first.json()["position"]

    count = await db.scalar(select(func.count()).select_from(WaitlistEntry))
    assert count == 1


async def test_join_waitlist_with_referral(client: AsyncClient, db: AsyncSession):
    referrer = await create_waitlist_entry(db, email="host@example.com", referral_code="FRIEND01")
    await db.commit()

    resp = await client.post(
        "/waitlist", json={"email": "guest@example.com", "referral_code": "friend01"}
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["referred_by"] == referrer.id

    host = await client.get("/waitlist/host@example.com")
    assert host.json()["data"]["referral_count"] == 1


async def test_join_waitlist_unknown_referral_code(client: AsyncClient):
    resp = await client.post(
        "/waitlist", json={"email": "guest@example.com", "referral_code": "NOPE0000"}
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["referred_by"] is None


async def test_join_waitlist_invalid_email(client: AsyncClient):
    resp = await client.post("/waitlist", json={"email": "not-an-email"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid waitlist data"}


async def test_get_waitlist_entry(client: AsyncClient, db: AsyncSession):
    await create_waitlist_entry(db, email="ada@example.com", position=7)
    await db.commit()

    resp = await client.get("/waitlist/ADA@example.com")
    assert resp.status_code == 200
    assert resp.json()["position"] == 7
    assert resp.json()["data"]["email"] == "ada@example.com"


async def test_get_waitlist_entry_not_found(client: AsyncClient):
    resp = await client.get("/waitlist/ghost@example.com")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Waitlist entry not found"}


async def test_waitlist_stats_counts_pending(client: AsyncClient, db: AsyncSession):
    await create_waitlist_entry(db, email="a@example.com", position=1)
    await create_waitlist_entry(db, email="b@example.com", position=2)
    await create_waitlist_entry(db, email="c@example.com", position=3, status="invited")
    await create_waitlist_entry(db, email="d@example.com", position=4, status="converted")
    await db.commit()

    resp = await client.get("/waitlist/stats")
    assert resp.status_code == 200
    assert resp.json() == {"data": {"total": 2}}


async def test_waitlist_stats_empty(client: AsyncClient):
    resp = await client.get("/waitlist/stats")
    assert resp.json() == {"data": {"total": 0}}
