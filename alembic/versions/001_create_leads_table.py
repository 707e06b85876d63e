"""Create leads table

Revision ID: 001
Revises:
Create Date: 2026-09-01 00:00:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_FLAG_COLUMNS = (
    "email_sent_1",
    "dm_li_sent_1",
    "dm_fb_sent_1",
    "dm_ig_sent_1",
    "call_done",
    "email_sent_2",
    "dm_sent_2",
    "wa_voice_sent",
)


def upgrade() -> None:
    op.create_table(
        "leads",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="NEW"),
        sa.Column("company", sa.String(), nullable=True),
        sa.Column("key_decision_maker", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("mobile", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *[
            sa.Column(name, sa.Boolean(), nullable=False, server_default=sa.false())
            for name in _FLAG_COLUMNS
        ],
        sa.Column("replied_at_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("mobile_valid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_action_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_action", sa.String(), nullable=True),
        sa.Column("next_action_due_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("outcome", sa.String(), nullable=True),
        sa.Column("qualified", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_leads_id"), "leads", ["id"], unique=False)
    op.create_index(op.f("ix_leads_organization_id"), "leads", ["organization_id"], unique=False)
    # Due-lead scan: status IN (...) AND next_action_due_utc <= now
    op.create_index(
        "ix_leads_status_next_action_due_utc",
        "leads",
        ["status", "next_action_due_utc"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_leads_status_next_action_due_utc", table_name="leads")
    op.drop_index(op.f("ix_leads_organization_id"), table_name="leads")
    op.drop_index(op.f("ix_leads_id"), table_name="leads")
    op.drop_table("leads")
