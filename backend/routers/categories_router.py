from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from models.domain import ActingIdentity
from repositories.database import get_db
from services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[schemas.Category])
def get_categories(db: Session = Depends(get_db)) -> List[db_models.Category]:
    return CategoryService.list_categories(db)


@router.post("", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    identity: ActingIdentity = Depends(auth.get_admin_identity),
) -> db_models.Category:
    """Create a category. Admin only."""
    return CategoryService.create_category(db, identity, category.name)
