"""Saved scenario store and routes against an aiosqlite database."""

import uuid

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from homecalc.api.app import app
from homecalc.api.deps import get_db
from homecalc.data.scenario_store import ScenarioStore
from homecalc.errors import NotFound
from homecalc.models.db import Base

INPUTS = {"location": "Austin, TX 78701", "income": 120000, "fico": 700, "downPaymentPct": 3.5, "debts": 500}


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'scenarios.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def store(session_factory):
    async with session_factory() as session:
        yield ScenarioStore(session)


@pytest.fixture
async def api(session_factory):
    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


# ── Store tests ──────────────────────────────────────────────────

class TestScenarioStore:
    async def test_create_and_get(self, store):
        created = await store.create("alice", name="Starter home", inputs=INPUTS)
        assert isinstance(created.id, uuid.UUID)
        assert created.created_at is not None
        fetched = await store.get("alice", created.id)
        assert fetched.inputs == INPUTS
        assert fetched.name == "Starter home"

    async def test_list_is_scoped_to_user(self, store):
        await store.create("alice", name="A1", inputs=INPUTS)
        await store.create("alice", name="A2", inputs=INPUTS)
        await store.create("bob", name="B1", inputs=INPUTS)
        names = {s.name for s in await store.list("alice")}
        assert names == {"A1", "A2"}

    async def test_other_users_scenario_is_not_found(self, store):
        created = await store.create("alice", inputs=INPUTS)
        with pytest.raises(NotFound):
            await store.get("bob", created.id)

    async def test_missing_scenario_is_not_found(self, store):
        with pytest.raises(NotFound):
            await store.get("alice", uuid.uuid4())

    async def test_update_only_given_fields(self, store):
        created = await store.create("alice", name="Old", notes="keep me", inputs=INPUTS)
        updated = await store.update("alice", created.id, name="New", user_id="mallory")
        assert updated.name == "New"
        assert updated.notes == "keep me"
        assert updated.user_id == "alice"

    async def test_delete(self, store):
        created = await store.create("alice", inputs=INPUTS)
        await store.delete("alice", created.id)
        with pytest.raises(NotFound):
            await store.get("alice", created.id)

    async def test_delete_other_users_scenario(self, store):
        created = await store.create("alice", inputs=INPUTS)
        with pytest.raises(NotFound):
            await store.delete("bob", created.id)
        assert await store.get("alice", created.id)


# ── Route tests ──────────────────────────────────────────────────

ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}


class TestScenarioRoutes:
    async def test_requires_user(self, api):
        resp = await api.get("/api/scenarios")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Not authenticated"}

    async def test_crud(self, api):
        resp = await api.post("/api/scenarios", json={"name": "First", "inputs": INPUTS}, headers=ALICE)
        assert resp.status_code == 201
        scenario = resp.json()
        scenario_id = scenario["id"]
        assert scenario["inputs"] == INPUTS
        assert scenario["results"] is None

        resp = await api.get("/api/scenarios", headers=ALICE)
        assert [s["id"] for s in resp.json()] == [scenario_id]

        resp = await api.patch(
            f"/api/scenarios/{scenario_id}",
            json={"results": {"maxHomePrice": 400000}},
            headers=ALICE,
        )
        assert resp.status_code == 200
        assert resp.json()["results"] == {"maxHomePrice": 400000}
        assert resp.json()["name"] == "First"

        resp = await api.delete(f"/api/scenarios/{scenario_id}", headers=ALICE)
        assert resp.status_code == 204
        resp = await api.get(f"/api/scenarios/{scenario_id}", headers=ALICE)
        assert resp.status_code == 404

    async def test_other_user_gets_404(self, api):
        resp = await api.post("/api/scenarios", json={"inputs": INPUTS}, headers=ALICE)
        scenario_id = resp.json()["id"]
        resp = await api.get(f"/api/scenarios/{scenario_id}", headers=BOB)
        assert resp.status_code == 404
        assert resp.json() == {"error": "Scenario not found or access denied"}
        assert (await api.get("/api/scenarios", headers=BOB)).json() == []

    async def test_inputs_required(self, api):
        resp = await api.post("/api/scenarios", json={"name": "No inputs"}, headers=ALICE)
        assert resp.status_code == 400

    async def test_bad_id(self, api):
        resp = await api.get("/api/scenarios/not-a-uuid", headers=ALICE)
        assert resp.status_code == 400
