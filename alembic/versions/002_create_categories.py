"""002: create categories table

Revision ID: 002
Revises: 001
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE categories (
            id              SERIAL          PRIMARY KEY,
            name            VARCHAR(100)    NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_categories_name   UNIQUE (name)
        );
    """)
    op.execute("""
        INSERT INTO categories (name) VALUES
            ('Electronics'),
            ('Collectibles'),
            ('Fashion'),
            ('Home & Garden'),
            ('Sports'),
            ('Books'),
            ('Art'),
            ('Other');
    """)
    op.execute("COMMENT ON TABLE categories IS 'Listing categories — reference data';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS categories CASCADE;")
