"""002: create line_items table

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE line_items (
            id              VARCHAR(32)     PRIMARY KEY,
            order_id        VARCHAR(32)     NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
            artwork_id      VARCHAR(64)     NOT NULL,
            edition_set_id  VARCHAR(64),
            price_cents     BIGINT          NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_line_items_price_gte_0 CHECK (price_cents >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_line_items_order ON line_items (order_id);")
    op.execute("CREATE INDEX idx_line_items_artwork ON line_items (artwork_id, edition_set_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS line_items CASCADE;")
