"""Investment Workflow: slot reservation, failure atomicity and portfolio reads.

Invariants:
    - amount = min_investment * slots for accepted requests
    - available_slots drops by exactly the purchased slots; failures mutate nothing
    - Concurrent requests whose total exceeds availability: at most one succeeds
    - A user never sees another user's investment
"""

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from investestate.core.domain_types import WizardStep
from investestate.core.errors import (
    InsufficientSlotsError, ModelNotFoundError, ProjectNotFoundError,
    ResourceNotFoundError, ValidationFailedError,
)
from investestate.core.records import DraftRecord, InvestmentModelRecord
from investestate.core.wizard import DRAFT_VERSION
from investestate.services.investment_workflow import InvestmentWorkflow


NOW = datetime(2025, 4, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
async def workflow(memory_repos):
    # Model {100000, 12%, 3y, 10 slots}
    await memory_repos.catalog.add_model(
        InvestmentModelRecord("aura-test", "Test", 100000, 12, 3, 10, "aura"),
    )
    return InvestmentWorkflow(memory_repos)


async def _available(repos, model_id: str) -> int:
    return (await repos.catalog.get_model(model_id)).available_slots


async def test_accepted_investment_computes_amount_and_maturity(workflow, memory_repos):
    inv = await workflow.create_investment(1, "aura", "aura-test", 2, now=NOW)
    assert inv.amount == 200000
    assert inv.expected_returns == 12
    assert inv.maturity_date == datetime(2028, 4, 1, 9, 0, tzinfo=timezone.utc)
    assert inv.project_name == "Aura"
    assert await _available(memory_repos, "aura-test") == 8


async def test_slots_decrease_by_sum_of_purchases(workflow, memory_repos):
    for slots in (1, 3, 2):
        await workflow.create_investment(1, "aura", "aura-test", slots, now=NOW)
    assert await _available(memory_repos, "aura-test") == 4


async def test_project_counter_follows_purchases(workflow, memory_repos):
    await workflow.create_investment(1, "aura", "aura-test", 3, now=NOW)
    project = await memory_repos.catalog.get_project("aura")
    assert project.available_slots == 15


async def test_oversized_request_fails_without_mutation(workflow, memory_repos):
    with pytest.raises(InsufficientSlotsError):
        await workflow.create_investment(1, "aura", "aura-test", 11, now=NOW)
    assert await _available(memory_repos, "aura-test") == 10
    assert await memory_repos.investments.list_by_user(1) == []


async def test_unknown_project_and_model(workflow, memory_repos):
    with pytest.raises(ProjectNotFoundError):
        await workflow.create_investment(1, "atlantis", "aura-test", 1, now=NOW)
    with pytest.raises(ModelNotFoundError):
        await workflow.create_investment(1, "aura", "aura-diamond", 1, now=NOW)
    assert await memory_repos.investments.list_by_user(1) == []


async def test_model_of_other_project_is_rejected(workflow, memory_repos):
    with pytest.raises(ModelNotFoundError):
        await workflow.create_investment(1, "aura", "subha-gold", 1, now=NOW)
    assert await _available(memory_repos, "subha-gold") == 10


async def test_zero_slots_is_validation_error(workflow):
    with pytest.raises(ValidationFailedError):
        await workflow.create_investment(1, "aura", "aura-test", 0, now=NOW)


class YieldingCatalog:
    """Yields to the loop after every model read so concurrent requests interleave."""

    def __init__(self, inner):
        self.inner = inner
        self.seen_slots: list[int] = []

    async def get_model(self, model_id: str):
        model = await self.inner.get_model(model_id)
        self.seen_slots.append(model.available_slots if model else 0)
        await asyncio.sleep(0)
        return model

    def __getattr__(self, name):
        return getattr(self.inner, name)


async def test_concurrent_requests_never_oversell(workflow, memory_repos):
    catalog = YieldingCatalog(memory_repos.catalog)
    interleaved = InvestmentWorkflow(replace(memory_repos, catalog=catalog))
    results = await asyncio.gather(
        interleaved.create_investment(1, "aura", "aura-test", 6, now=NOW),
        interleaved.create_investment(2, "aura", "aura-test", 6, now=NOW),
        return_exceptions=True,
    )
    # Both requests passed the pre-check against the same snapshot
    assert catalog.seen_slots[:2] == [10, 10]
    failures = [r for r in results if isinstance(r, InsufficientSlotsError)]
    successes = [r for r in results if not isinstance(r, Exception)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert failures[0].available == 4
    assert await _available(memory_repos, "aura-test") == 4
    assert len(memory_repos.investments.state.investments) == 1


async def test_reservation_waits_for_model_lock(workflow, memory_repos):
    store_state = memory_repos.investments.state
    lock = store_state.model_locks["aura-test"]
    await lock.acquire()
    task = asyncio.create_task(
        workflow.create_investment(1, "aura", "aura-test", 2, now=NOW),
    )
    for _ in range(5):
        await asyncio.sleep(0)
    assert not task.done()
    assert await _available(memory_repos, "aura-test") == 10

    lock.release()
    investment = await task
    assert investment.slots == 2
    assert await _available(memory_repos, "aura-test") == 8


async def test_lost_reservation_surfaces_as_insufficient_slots(
    workflow, memory_repos, monkeypatch,
):
    async def lost_race(new):
        return None

    monkeypatch.setattr(memory_repos.investments, "reserve_and_record", lost_race)
    with pytest.raises(InsufficientSlotsError):
        await workflow.create_investment(1, "aura", "aura-test", 2, now=NOW)


async def test_investment_clears_draft_for_project(workflow, memory_repos):
    await memory_repos.drafts.save(DraftRecord(
        user_id=1, project_id="aura", model_id="aura-test", slots=2, quantity=1,
        step=WizardStep.SUMMARY, version=DRAFT_VERSION, updated_at=NOW,
    ))
    await workflow.create_investment(1, "aura", "aura-test", 2, now=NOW)
    assert await memory_repos.drafts.get(1, "aura") is None


async def test_draft_is_cleared_with_the_reservation(workflow, memory_repos, monkeypatch):
    async def unavailable(user_id, project_id):
        raise RuntimeError("draft store unavailable")

    await memory_repos.drafts.save(DraftRecord(
        user_id=1, project_id="aura", model_id="aura-test", slots=2, quantity=1,
        step=WizardStep.SUMMARY, version=DRAFT_VERSION, updated_at=NOW,
    ))
    monkeypatch.setattr(memory_repos.drafts, "delete", unavailable)
    investment = await workflow.create_investment(1, "aura", "aura-test", 2, now=NOW)
    assert investment.slots == 2
    assert await memory_repos.drafts.get(1, "aura") is None


async def test_list_is_newest_first_and_per_user(workflow):
    first = await workflow.create_investment(1, "aura", "aura-test", 1, now=NOW)
    second = await workflow.create_investment(1, "aura", "aura-gold", 1, now=NOW)
    await workflow.create_investment(2, "aura", "aura-test", 1, now=NOW)
    listed = await workflow.list_investments(1)
    assert [inv.id for inv in listed] == [second.id, first.id]


async def test_foreign_investment_is_not_found(workflow):
    inv = await workflow.create_investment(1, "aura", "aura-test", 1, now=NOW)
    assert (await workflow.get_investment(1, inv.id)).id == inv.id
    with pytest.raises(ResourceNotFoundError):
        await workflow.get_investment(2, inv.id)
    with pytest.raises(ResourceNotFoundError):
        await workflow.get_investment(1, 999)


async def test_portfolio_summary(workflow):
    await workflow.create_investment(1, "aura", "aura-test", 2, now=NOW)
    await workflow.create_investment(1, "subha", "subha-virtual", 1, now=NOW)
    summary = await workflow.portfolio_summary(1, now=NOW + timedelta(days=1))
    assert summary.total_invested == 275000
    assert summary.current_value == 275000
    assert summary.growth_percentage == 11.0
    assert summary.active_investments == 2
