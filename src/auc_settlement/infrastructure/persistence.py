"""TransactionRepository — raw SQL. transactions.listing_id is UNIQUE."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_settlement.domain.models import Transaction

_INSERT_TXN_SQL = text("""
    INSERT INTO transactions (id, listing_id, bid_id, buyer_id, amount, created_at)
    VALUES (:id, :listing_id, :bid_id, :buyer_id, :amount, :created_at)
""")

_LIST_RECENT_SQL = text("""
    SELECT id, listing_id, bid_id, buyer_id, amount, created_at
    FROM transactions
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")


def _row_to_txn(row: Any) -> Transaction:
    return Transaction(
        id=row.id,
        listing_id=row.listing_id,
        bid_id=row.bid_id,
        buyer_id=str(row.buyer_id),
        amount=row.amount,
        created_at=row.created_at,
    )


class TransactionRepository:
    async def insert(self, txn: Transaction, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_TXN_SQL,
            {
                "id": txn.id,
                "listing_id": txn.listing_id,
                "bid_id": txn.bid_id,
                "buyer_id": txn.buyer_id,
                "amount": txn.amount,
                "created_at": txn.created_at,
            },
        )

    async def list_recent(self, limit: int, db: AsyncSession) -> list[Transaction]:
        result = await db.execute(_LIST_RECENT_SQL, {"limit": limit})
        return [_row_to_txn(row) for row in result.fetchall()]
