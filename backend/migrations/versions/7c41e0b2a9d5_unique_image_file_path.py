"""unique_image_file_path

Revision ID: 7c41e0b2a9d5
Revises: 1a2f6c3d9e01
Create Date: 2026-10-19 16:40:07.118245

"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7c41e0b2a9d5"
down_revision: Union[str, None] = "1a2f6c3d9e01"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index(op.f("ix_images_file_path"), "images", ["file_path"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_images_file_path"), table_name="images")
