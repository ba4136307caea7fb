"""001: create orders table

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id                    VARCHAR(32)     PRIMARY KEY,
            code                  VARCHAR(16)     NOT NULL,
            buyer_id              VARCHAR(64)     NOT NULL,
            buyer_type            VARCHAR(20)     NOT NULL DEFAULT 'user',
            seller_id             VARCHAR(64)     NOT NULL,
            seller_type           VARCHAR(20)     NOT NULL DEFAULT 'partner',
            currency_code         VARCHAR(3)      NOT NULL,
            state                 VARCHAR(20)     NOT NULL DEFAULT 'pending',
            state_reason          VARCHAR(50),
            items_total_cents     BIGINT          NOT NULL DEFAULT 0,
            shipping_total_cents  BIGINT          NOT NULL DEFAULT 0,
            commission_fee_cents  BIGINT          NOT NULL DEFAULT 0,
            seller_total_cents    BIGINT          NOT NULL DEFAULT 0,
            buyer_total_cents     BIGINT          NOT NULL DEFAULT 0,
            version               INT             NOT NULL DEFAULT 1,
            created_at            TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at            TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_orders_code               UNIQUE (code),
            CONSTRAINT ck_orders_buyer_type         CHECK (buyer_type IN ('user', 'partner')),
            CONSTRAINT ck_orders_seller_type        CHECK (seller_type IN ('user', 'partner')),
            CONSTRAINT ck_orders_currency_code      CHECK (currency_code ~ '^[A-Z]{3}$'),
            CONSTRAINT ck_orders_state              CHECK (
                state IN ('pending', 'submitted', 'approved', 'canceled', 'fulfilled', 'refunded')
            ),
            CONSTRAINT ck_orders_state_reason       CHECK (
                (state = 'canceled' AND state_reason IN (
                    'seller_lapsed', 'seller_rejected', 'buyer_rescinded',
                    'buyer_abandoned', 'admin_canceled'))
                OR (state <> 'canceled' AND state_reason IS NULL)
            ),
            CONSTRAINT ck_orders_totals_gte_0       CHECK (
                items_total_cents >= 0 AND shipping_total_cents >= 0
                AND commission_fee_cents >= 0 AND seller_total_cents >= 0
                AND buyer_total_cents >= 0
            ),
            CONSTRAINT ck_orders_version            CHECK (version >= 1)
        );
    """)
    op.execute("CREATE INDEX idx_orders_buyer_state ON orders (buyer_id, state);")
    op.execute("CREATE INDEX idx_orders_seller_state ON orders (seller_id, state, created_at DESC);")
    op.execute("COMMENT ON TABLE orders IS 'Marketplace orders — one buyer, one seller, lifecycle in state';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
