"""Pydantic schemas for the admin settlement surface."""

from pydantic import BaseModel

from src.auc_common.cents import cents_to_display
from src.auc_settlement.domain.models import SweepReport, Transaction


class SweepReportOut(BaseModel):
    started_at: str
    scanned: int
    sold: int
    expired: int
    skipped: int
    failed: int
    lease_denied: bool
    failed_listing_ids: list[str]

    @classmethod
    def from_domain(cls, report: SweepReport) -> "SweepReportOut":
        return cls(
            started_at=report.started_at.isoformat(),
            scanned=report.scanned,
            sold=report.sold,
            expired=report.expired,
            skipped=report.skipped,
            failed=report.failed,
            lease_denied=report.lease_denied,
            failed_listing_ids=list(report.failed_listing_ids),
        )


class TransactionOut(BaseModel):
    transaction_id: str
    listing_id: str
    bid_id: str
    buyer_id: str
    amount_cents: int
    amount_display: str
    created_at: str

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionOut":
        return cls(
            transaction_id=txn.id,
            listing_id=txn.listing_id,
            bid_id=txn.bid_id,
            buyer_id=txn.buyer_id,
            amount_cents=txn.amount,
            amount_display=cents_to_display(txn.amount),
            created_at=txn.created_at.isoformat(),
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionOut]


class InvariantReport(BaseModel):
    ok: bool
    violations: list[str]
