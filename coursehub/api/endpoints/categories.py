# coursehub/api/endpoints/categories.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.core.exceptions import NotFoundError
from coursehub.core.security import get_current_admin
from coursehub.db.session import get_db
from coursehub.models.user import User
from coursehub.schemas.auth import MessageResponse
from coursehub.schemas.category import (
    CategoryCreate,
    CategoryPublic,
    CategoryUpdate,
    CategoryUpdated,
)
from coursehub.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


def _get_or_404(db: Session, category_id: int):
    category = category_service.get_category(db, category_id)
    if not category:
        raise NotFoundError("Category not found")
    return category


@router.post("/", response_model=CategoryPublic, status_code=status.HTTP_201_CREATED)
def create_category(
    obj_in: CategoryCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return category_service.create_category(db, obj_in=obj_in)


@router.get("/", response_model=List[CategoryPublic])
def list_categories(db: Session = Depends(get_db)):
    return category_service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryPublic)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, category_id)


@router.put("/{category_id}", response_model=CategoryUpdated)
def update_category(
    category_id: int,
    obj_in: CategoryUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    category = _get_or_404(db, category_id)
    category = category_service.update_category(db, db_obj=category, obj_in=obj_in)
    return CategoryUpdated(
        message="Category updated successfully",
        category=CategoryPublic.model_validate(category),
    )


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    category = _get_or_404(db, category_id)
    category_service.delete_category(db, db_obj=category)
    return MessageResponse(message="Category deleted successfully")
