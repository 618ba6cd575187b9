"""003: create listings table

Revision ID: 003
Revises: 002
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE listings (
            id              VARCHAR(64)     PRIMARY KEY,
            seller_id       UUID            NOT NULL REFERENCES users (id),
            category_id     INT             NOT NULL REFERENCES categories (id),
            title           VARCHAR(200)    NOT NULL,
            description     TEXT            DEFAULT NULL,
            starting_price  BIGINT          NOT NULL,
            current_price   BIGINT          NOT NULL,
            end_time        TIMESTAMPTZ     NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'active',
            settled_at      TIMESTAMPTZ     DEFAULT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_starting_price   CHECK (starting_price > 0),
            CONSTRAINT ck_listings_price_floor      CHECK (current_price >= starting_price),
            CONSTRAINT ck_listings_status           CHECK (
                status IN ('active', 'sold', 'expired')
            ),
            CONSTRAINT ck_listings_settled_at       CHECK (
                (status = 'active') = (settled_at IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_listings_status_end ON listings (status, end_time);")
    op.execute("CREATE INDEX idx_listings_seller ON listings (seller_id, created_at DESC);")
    op.execute("CREATE INDEX idx_listings_category ON listings (category_id, status);")
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE listings IS 'Auction listings — current_price moves only via accepted bids';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
