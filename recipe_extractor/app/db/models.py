from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, Index, Integer, JSON, String, Text

from recipe_extractor.app.db.base import Base


class SavedRecipe(Base):
    __tablename__ = "saved_recipes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    source_url = Column(String)
    method = Column(String, nullable=False)
    markdown = Column(Text, nullable=False)
    # Full Recipe as JSON (Recipe.model_dump(mode="json"))
    recipe_json = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_saved_recipes_user_title", "user_id", "title"),
        Index("ix_saved_recipes_user_source_url", "user_id", "source_url"),
    )


class GroceryList(Base):
    __tablename__ = "grocery_lists"

    user_id = Column(String, primary_key=True)
    # GroceryListState as JSON
    state = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class RecipeCacheEntry(Base):
    __tablename__ = "recipe_cache"

    url = Column(String, primary_key=True)
    variant = Column(String, primary_key=True)
    strategy = Column(String, primary_key=True)
    # Recipe as JSON (Recipe.model_dump(mode="json"))
    recipe_json = Column(JSON, nullable=False)
    # Extraction time, epoch milliseconds; TTL is measured from here
    timestamp_ms = Column(BigInteger, nullable=False)
