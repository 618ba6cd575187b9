"""Settlement domain models — pure dataclasses."""
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Transaction:
    """Created exactly once per sold listing; mirrors the winning bid."""

    id: str
    listing_id: str
    bid_id: str
    buyer_id: str
    amount: int  # cents
    created_at: datetime


@dataclass(frozen=True)
class SettlementResult:
    listing_id: str
    status: str  # sold / expired
    transaction: Transaction | None = None


@dataclass
class SweepReport:
    started_at: datetime
    scanned: int = 0
    sold: int = 0
    expired: int = 0
    skipped: int = 0  # already settled or no longer expired on re-read
    failed: int = 0
    lease_denied: bool = False
    failed_listing_ids: list[str] = field(default_factory=list)

    def record(self, result: SettlementResult | None) -> None:
        if result is None:
            self.skipped += 1
        elif result.status == "sold":
            self.sold += 1
        else:
            self.expired += 1
