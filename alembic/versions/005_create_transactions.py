"""005: create transactions table

Revision ID: 005
Revises: 004
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id              VARCHAR(64)     PRIMARY KEY,
            listing_id      VARCHAR(64)     NOT NULL REFERENCES listings (id),
            bid_id          VARCHAR(64)     NOT NULL REFERENCES bids (id),
            buyer_id        UUID            NOT NULL REFERENCES users (id),
            amount          BIGINT          NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_transactions_listing  UNIQUE (listing_id),
            CONSTRAINT ck_transactions_amount   CHECK (amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_buyer ON transactions (buyer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_transactions_time ON transactions (created_at DESC);")
    op.execute("COMMENT ON TABLE transactions IS 'One row per sold listing, written by the settlement sweep';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
