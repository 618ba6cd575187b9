# src/auc_settlement/application/service.py
"""Admin settlement service: manual sweep, invariant audit, transaction log."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.auc_settlement.application.schemas import (
    InvariantReport,
    SweepReportOut,
    TransactionListResponse,
    TransactionOut,
)
from src.auc_settlement.application.sweeper import SettlementSweeper
from src.auc_settlement.domain.invariants import verify_ledger_invariants
from src.auc_settlement.domain.repository import TransactionRepositoryProtocol
from src.auc_settlement.infrastructure.persistence import TransactionRepository

logger = logging.getLogger(__name__)


class SettlementAdminService:
    def __init__(self, txn_repo: TransactionRepositoryProtocol | None = None) -> None:
        self._txns: TransactionRepositoryProtocol = txn_repo or TransactionRepository()

    async def trigger_sweep(self, sweeper: SettlementSweeper, requested_by: str) -> SweepReportOut:
        """Run one tick now. Safe to call while the background loop is running."""
        logger.info("Manual sweep requested by %s", requested_by)
        report = await sweeper.run_once()
        return SweepReportOut.from_domain(report)

    async def verify_invariants(self, db: AsyncSession) -> InvariantReport:
        violations = await verify_ledger_invariants(db)
        return InvariantReport(ok=len(violations) == 0, violations=violations)

    async def list_transactions(self, db: AsyncSession, limit: int) -> TransactionListResponse:
        txns = await self._txns.list_recent(limit, db)
        return TransactionListResponse(items=[TransactionOut.from_domain(t) for t in txns])
