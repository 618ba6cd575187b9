# src/auc_bidding/domain/repository.py
"""BidRepository Protocol — interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_bidding.domain.models import Bid


class BidRepositoryProtocol(Protocol):
    async def insert(self, bid: Bid, db: AsyncSession) -> None: ...

    async def get_highest_bid(self, listing_id: str, db: AsyncSession) -> Bid | None: ...
