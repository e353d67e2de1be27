"""create news_articles

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

news_category = sa.Enum("Olahraga", "Politik", "Teknologi", "Hiburan", name="news_category")


def upgrade() -> None:
    op.create_table(
        "news_articles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=False),
        sa.Column("category", news_category, nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("author", sa.Text(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_news_articles_created_at", "news_articles", ["created_at"])
    op.create_index(
        "ix_news_articles_category_created_at", "news_articles", ["category", "created_at"]
    )
    op.create_index(
        "ix_news_articles_is_featured_created_at", "news_articles", ["is_featured", "created_at"]
    )
    op.create_index("ix_news_articles_view_count", "news_articles", ["view_count"])


def downgrade() -> None:
    op.drop_index("ix_news_articles_view_count", table_name="news_articles")
    op.drop_index("ix_news_articles_is_featured_created_at", table_name="news_articles")
    op.drop_index("ix_news_articles_category_created_at", table_name="news_articles")
    op.drop_index("ix_news_articles_created_at", table_name="news_articles")
    op.drop_table("news_articles")
    news_category.drop(op.get_bind(), checkfirst=True)
