"""Create translations, translation_tags and the translation_tag association

Revision ID: a1f3c5e7b901
Revises:

"""

from alembic import op
import sqlalchemy as sa


revision = "a1f3c5e7b901"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "translations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(length=255), nullable=False),
        sa.Column("locale", sa.String(length=10), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("namespace", sa.String(length=255), nullable=False, server_default="general"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("translations", schema=None) as batch_op:
        batch_op.create_index("ix_translations_key", ["key"], unique=True)
        batch_op.create_index("ix_translations_locale", ["locale"], unique=False)
        batch_op.create_index("ix_translations_namespace", ["namespace"], unique=False)
        batch_op.create_index("ix_translations_is_active", ["is_active"], unique=False)
        # Composite indexes for export (locale + namespace) and key lookups per locale
        batch_op.create_index("idx_translations_locale_namespace", ["locale", "namespace"], unique=False)
        batch_op.create_index("idx_translations_key_locale", ["key", "locale"], unique=False)

    op.create_table(
        "translation_tags",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "translation_tag",
        sa.Column("translation_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["translation_id"], ["translations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["translation_tags.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("translation_id", "tag_id"),
    )
    with op.batch_alter_table("translation_tag", schema=None) as batch_op:
        batch_op.create_index("idx_translation_tag_tag_id", ["tag_id"], unique=False)


def downgrade():
    with op.batch_alter_table("translation_tag", schema=None) as batch_op:
        batch_op.drop_index("idx_translation_tag_tag_id")
    op.drop_table("translation_tag")

    op.drop_table("translation_tags")

    with op.batch_alter_table("translations", schema=None) as batch_op:
        batch_op.drop_index("idx_translations_key_locale")
        batch_op.drop_index("idx_translations_locale_namespace")
        batch_op.drop_index("ix_translations_is_active")
        batch_op.drop_index("ix_translations_namespace")
        batch_op.drop_index("ix_translations_locale")
        batch_op.drop_index("ix_translations_key")

    op.drop_table("translations")
