"""SQLAlchemy database models."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mealmatch.database import Base


class RecipeRow(Base):
    """
    Recipe as stored in the ``recipes`` table.

    Column names follow the French headers of the recipe spreadsheet the
    table was imported from; attribute names match :class:`mealmatch.schemas.Recipe`
    so rows validate directly into it.
    """

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column("nom", String, nullable=False)
    ingredients_text: Mapped[str] = mapped_column("ingredients", Text, default="")
    type: Mapped[str] = mapped_column(String(50), default="")  # "sucré", "salé"
    difficulty: Mapped[str] = mapped_column("difficulte", String(50), default="")
    prep_time_minutes: Mapped[int] = mapped_column("temps_preparation_min", Integer, default=0)
    servings: Mapped[int] = mapped_column("nb_personnes", Integer, default=1)
    calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    image_ref: Mapped[str | None] = mapped_column("image_url", Text, nullable=True)
    short_description: Mapped[str] = mapped_column("description_courte", Text, default="")
    instructions: Mapped[str] = mapped_column(Text, default="")
    equipment: Mapped[str] = mapped_column("equipements", Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_recipes_nom", "nom"),
        Index("idx_recipes_type", "type"),
    )
