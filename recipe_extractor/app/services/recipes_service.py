import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_extractor.app.db import models
from recipe_extractor.app.schemas.recipe import Recipe, StoredRecipe
from recipe_extractor.app.services.errors import PersistenceError

logger = logging.getLogger(__name__)


def to_stored_recipe(row: models.SavedRecipe) -> StoredRecipe:
    return StoredRecipe(
        id=row.id,
        user_id=row.user_id,
        recipe=Recipe.model_validate(row.recipe_json),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _find_existing(db: Session, user_id: str, recipe: Recipe):
    conditions = [models.SavedRecipe.title == recipe.title]
    if recipe.url:
        conditions.append(models.SavedRecipe.source_url == recipe.url)
    stmt = (
        select(models.SavedRecipe)
        .where(models.SavedRecipe.user_id == user_id, or_(*conditions))
        .order_by(models.SavedRecipe.id)
    )
    return db.scalars(stmt).first()


def save_recipe(db: Session, user_id: str, recipe: Recipe) -> int:
    """Save a recipe for the user; same title or same source URL updates the existing row."""
    user_id_str = str(user_id)
    try:
        row = _find_existing(db, user_id_str, recipe)
        if row is None:
            row = models.SavedRecipe(user_id=user_id_str)
            db.add(row)
        else:
            logger.info("Updating saved recipe %s for user %s", row.id, user_id_str)
        row.title = recipe.title
        row.source_url = recipe.url
        row.method = recipe.method.value
        row.markdown = recipe.markdown
        row.recipe_json = recipe.model_dump(mode="json")
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Failed to save recipe: {exc}") from exc
    return row.id


def list_recipes(db: Session, user_id: str) -> List[StoredRecipe]:
    user_id_str = str(user_id)
    stmt = (
        select(models.SavedRecipe)
        .where(models.SavedRecipe.user_id == user_id_str)
        .order_by(models.SavedRecipe.updated_at.desc(), models.SavedRecipe.id.desc())
    )
    try:
        rows = list(db.scalars(stmt).all())
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to list recipes: {exc}") from exc
    return [to_stored_recipe(row) for row in rows]


def _get_row(db: Session, user_id: str, recipe_id: int) -> models.SavedRecipe:
    stmt = select(models.SavedRecipe).where(
        models.SavedRecipe.user_id == str(user_id), models.SavedRecipe.id == recipe_id
    )
    try:
        row = db.scalars(stmt).first()
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to load recipe: {exc}") from exc
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return row


def get_recipe(db: Session, user_id: str, recipe_id: int) -> StoredRecipe:
    return to_stored_recipe(_get_row(db, user_id, recipe_id))


def delete_recipe(db: Session, user_id: str, recipe_id: int) -> None:
    row = _get_row(db, user_id, recipe_id)
    try:
        db.delete(row)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Failed to delete recipe: {exc}") from exc
