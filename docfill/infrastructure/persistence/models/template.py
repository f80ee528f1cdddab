"""Template ORM model. Document skeleton file managed by the template collaborator."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from docfill.infrastructure.persistence.database import Base
from docfill.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class Template(CuidMixin, CreatedAtMixin, Base):
    """Template file reference. Table: template."""

    __tablename__ = "template"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(1024), nullable=False)
