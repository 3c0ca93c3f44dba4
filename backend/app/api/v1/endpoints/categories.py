"""Category read endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.question import CategoryOut
from app.services import question_store

router = APIRouter()


@router.get("", response_model=list[CategoryOut])
def list_categories(db: Annotated[Session, Depends(get_db)]):
    """Categories ordered by name, used to look up ``categoryId`` filters."""
    return [CategoryOut.model_validate(c) for c in question_store.find_categories(db)]
