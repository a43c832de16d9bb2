"""
Credit balances backed by SQLite.

The decrement in :meth:`CreditRepository.try_charge` is a single conditional
UPDATE (``remaining >= cost``) executed inside a serialised write
transaction, so concurrent charges against one account can never overspend.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from modgate.database.db_connection import ConnectionManager
from modgate.datatypes.credit_datatypes import CreditState, CreditTransaction
from modgate.datatypes.enums import BillingCycle, ModerationModel
from modgate.datatypes.errors import InsufficientCredits
from modgate.moderation import credit_ledger
from modgate.util.logger import get_logger

logger = get_logger("credit_repo")


class UnknownAccount(LookupError):
    """Raised when no credit row exists for an account."""


def _parse_reset_date(raw: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(raw) if raw else None


class CreditRepository:
    """Read and update per-account credit balances."""

    def __init__(self, db: ConnectionManager) -> None:
        self._db = db

    async def get_state(self, account_id: str) -> CreditState | None:
        async with self._db.read() as conn:
            async with conn.execute(
                """
                SELECT remaining_credits, max_monthly_credits, reset_date, billing_cycle
                FROM credit_accounts
                WHERE account_id = ?
                """,
                (account_id,),
            ) as cursor:
                row = await cursor.fetchone()

        if row is None:
            return None

        return CreditState(
            remaining_credits=row[0],
            max_monthly_credits=row[1],
            reset_date=_parse_reset_date(row[2]),
            billing_cycle=BillingCycle.parse(row[3]),
        )

    async def upsert_state(self, account_id: str, state: CreditState) -> None:
        async with self._db.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO credit_accounts (account_id, remaining_credits, max_monthly_credits, reset_date, billing_cycle)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(account_id) DO UPDATE SET
                    remaining_credits   = excluded.remaining_credits,
                    max_monthly_credits = excluded.max_monthly_credits,
                    reset_date          = excluded.reset_date,
                    billing_cycle       = excluded.billing_cycle
                """,
                (
                    account_id,
                    state.remaining_credits,
                    state.max_monthly_credits,
                    state.reset_date.isoformat() if state.reset_date else None,
                    state.billing_cycle.to_wire_string(),
                ),
            )

    async def try_charge(
        self,
        account_id: str,
        model: ModerationModel,
        byte_length: int,
        description: str = "moderation",
    ) -> int:
        """Atomically charge an account and return its new balance.

        Raises:
            InsufficientCredits: If the balance does not cover the cost; nothing is written.
            UnknownAccount: If the account has no credit row.
        """
        required = credit_ledger.cost(model, byte_length)

        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE credit_accounts
                SET remaining_credits = remaining_credits - ?
                WHERE account_id = ? AND remaining_credits >= ?
                """,
                (required, account_id, required),
            )
            charged = cursor.rowcount == 1
            await cursor.close()

            async with conn.execute(
                "SELECT remaining_credits FROM credit_accounts WHERE account_id = ?",
                (account_id,),
            ) as cursor:
                row = await cursor.fetchone()

            if row is None:
                raise UnknownAccount(account_id)
            if not charged:
                logger.info("[CREDITS] Refused charge of %d for %s, %d remaining", required, account_id, row[0])
                raise InsufficientCredits(required, row[0])

            await conn.execute(
                """
                INSERT INTO credit_transactions
                    (id, account_id, amount, transaction_type, model_type, bytes_processed, description, created_at)
                VALUES (?, ?, ?, 'usage', ?, ?, ?, ?)
                """,
                (
                    str(uuid.uuid4()),
                    account_id,
                    -required,
                    model.to_wire_string(),
                    byte_length,
                    description,
                    datetime.now(timezone.utc).isoformat(),
                ),
            )

        logger.debug("[CREDITS] Charged %d to %s, %d remaining", required, account_id, row[0])
        return row[0]

    async def reset_period(
        self,
        account_id: str,
        max_monthly_credits: Optional[int] = None,
        next_reset: Optional[datetime] = None,
    ) -> CreditState:
        """Refill an account to its monthly cap, optionally changing the cap.

        The balance being replaced is read inside the write transaction, so
        the logged reset amount always matches the change actually applied.

        Raises:
            UnknownAccount: If the account has no credit row.
        """
        async with self._db.transaction() as conn:
            async with conn.execute(
                """
                SELECT remaining_credits, max_monthly_credits, billing_cycle
                FROM credit_accounts
                WHERE account_id = ?
                """,
                (account_id,),
            ) as cursor:
                row = await cursor.fetchone()

            if row is None:
                raise UnknownAccount(account_id)

            previous_balance = row[0]
            cap = row[1] if max_monthly_credits is None else max_monthly_credits
            refilled = CreditState(
                remaining_credits=cap,
                max_monthly_credits=cap,
                reset_date=next_reset,
                billing_cycle=BillingCycle.parse(row[2]),
            )

            await conn.execute(
                """
                UPDATE credit_accounts
                SET remaining_credits = ?, max_monthly_credits = ?, reset_date = ?
                WHERE account_id = ?
                """,
                (cap, cap, next_reset.isoformat() if next_reset else None, account_id),
            )
            await conn.execute(
                """
                INSERT INTO credit_transactions
                    (id, account_id, amount, transaction_type, description, created_at)
                VALUES (?, ?, ?, 'reset', 'monthly reset', ?)
                """,
                (
                    str(uuid.uuid4()),
                    account_id,
                    cap - previous_balance,
                    datetime.now(timezone.utc).isoformat(),
                ),
            )

        logger.info("[CREDITS] Reset %s to %d credits", account_id, cap)
        return refilled

    async def list_transactions(self, account_id: str, limit: int = 50) -> List[CreditTransaction]:
        """Most recent transactions first."""
        async with self._db.read() as conn:
            async with conn.execute(
                """
                SELECT id, amount, transaction_type, model_type, bytes_processed, description, created_at
                FROM credit_transactions
                WHERE account_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ?
                """,
                (account_id, limit),
            ) as cursor:
                rows = await cursor.fetchall()

        return [
            CreditTransaction(
                id=row[0],
                amount=row[1],
                transaction_type=row[2],
                model_type=ModerationModel.parse(row[3]) if row[3] else None,
                bytes_processed=row[4],
                description=row[5],
                created_at=datetime.fromisoformat(row[6]),
            )
            for row in rows
        ]
