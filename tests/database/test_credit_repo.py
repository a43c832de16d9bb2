"""
Tests for the SQLite credit store.

Validates:
- Snapshot storage and retrieval
- Atomic conditional charging
- Period resets and the transaction log
"""

import asyncio
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from modgate.database.db_connection import ConnectionManager
from modgate.datatypes.credit_datatypes import CreditState
from modgate.datatypes.enums import BillingCycle, ModerationModel
from modgate.datatypes.errors import InsufficientCredits
from modgate.repositories.credit_repo import CreditRepository, UnknownAccount


@pytest_asyncio.fixture
async def test_db():
    """Create a temporary test database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db = ConnectionManager()
        await db.open(Path(tmpdir) / "test.db")
        yield db
        await db.close()


@pytest_asyncio.fixture
async def repo(test_db):
    repository = CreditRepository(test_db)
    await repository.upsert_state("acct", CreditState(remaining_credits=1000, max_monthly_credits=1000))
    return repository


@pytest.mark.asyncio
async def test_state_round_trip(test_db):
    repository = CreditRepository(test_db)
    reset = datetime(2026, 11, 1, tzinfo=timezone.utc)
    state = CreditState(
        remaining_credits=40,
        max_monthly_credits=100,
        reset_date=reset,
        billing_cycle=BillingCycle.YEARLY,
    )

    await repository.upsert_state("acct", state)

    assert await repository.get_state("acct") == state
    assert await repository.get_state("missing") is None


@pytest.mark.asyncio
async def test_try_charge_decrements_balance(repo):
    balance = await repo.try_charge("acct", ModerationModel.SENTINEL, 100)

    assert balance == 700
    assert (await repo.get_state("acct")).remaining_credits == 700


@pytest.mark.asyncio
async def test_try_charge_exact_balance(repo):
    assert await repo.try_charge("acct", ModerationModel.OBSERVER, 1000) == 0


@pytest.mark.asyncio
async def test_try_charge_refuses_overspend(repo):
    with pytest.raises(InsufficientCredits) as excinfo:
        await repo.try_charge("acct", ModerationModel.OBSERVER, 1001)

    assert excinfo.value.required == 1001
    assert excinfo.value.remaining == 1000
    assert (await repo.get_state("acct")).remaining_credits == 1000
    assert await repo.list_transactions("acct") == []


@pytest.mark.asyncio
async def test_try_charge_unknown_account(repo):
    with pytest.raises(UnknownAccount):
        await repo.try_charge("ghost", ModerationModel.OBSERVER, 1)


@pytest.mark.asyncio
async def test_concurrent_charges_never_overspend(repo):
    async def attempt():
        try:
            await repo.try_charge("acct", ModerationModel.ARBITER, 30)
            return True
        except InsufficientCredits:
            return False

    results = await asyncio.gather(*(attempt() for _ in range(10)))

    # each charge costs 270, so only three fit in 1000
    assert results.count(True) == 3
    assert (await repo.get_state("acct")).remaining_credits == 1000 - 3 * 270


@pytest.mark.asyncio
async def test_charges_are_logged(repo):
    await repo.try_charge("acct", ModerationModel.SENTINEL, 10, description="first")
    await repo.try_charge("acct", ModerationModel.OBSERVER, 5, description="second")

    transactions = await repo.list_transactions("acct")

    assert [t.description for t in transactions] == ["second", "first"]
    assert transactions[1].amount == -30
    assert transactions[1].model_type is ModerationModel.SENTINEL
    assert transactions[1].bytes_processed == 10
    assert all(t.transaction_type == "usage" for t in transactions)


@pytest.mark.asyncio
async def test_reset_period_refills_to_cap(repo):
    await repo.try_charge("acct", ModerationModel.OBSERVER, 600)
    next_reset = datetime(2026, 12, 1, tzinfo=timezone.utc)

    state = await repo.reset_period("acct", next_reset=next_reset)

    assert state.remaining_credits == 1000
    assert state.reset_date == next_reset
    assert await repo.get_state("acct") == state

    reset_entry = (await repo.list_transactions("acct", limit=1))[0]
    assert reset_entry.transaction_type == "reset"
    assert reset_entry.amount == 600
    assert reset_entry.model_type is None


@pytest.mark.asyncio
async def test_reset_period_can_change_cap(repo):
    state = await repo.reset_period("acct", max_monthly_credits=5000)

    assert state.remaining_credits == 5000
    assert state.max_monthly_credits == 5000


@pytest.mark.asyncio
async def test_reset_racing_a_charge_keeps_log_consistent(repo):
    await repo.upsert_state("acct", CreditState(remaining_credits=400, max_monthly_credits=1000))

    await asyncio.gather(
        repo.reset_period("acct"),
        repo.try_charge("acct", ModerationModel.OBSERVER, 100),
    )

    final = (await repo.get_state("acct")).remaining_credits
    transactions = await repo.list_transactions("acct")

    assert sorted(t.transaction_type for t in transactions) == ["reset", "usage"]
    assert 400 + sum(t.amount for t in transactions) == final
    assert final in (900, 1000)


@pytest.mark.asyncio
async def test_reset_unknown_account(repo):
    with pytest.raises(UnknownAccount):
        await repo.reset_period("ghost")
