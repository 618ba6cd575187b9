"""TransactionRepository Protocol."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_settlement.domain.models import Transaction


class TransactionRepositoryProtocol(Protocol):
    async def insert(self, txn: Transaction, db: AsyncSession) -> None: ...

    async def list_recent(self, limit: int, db: AsyncSession) -> list[Transaction]: ...
