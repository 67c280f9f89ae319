# coursehub/services/category_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from coursehub.core.exceptions import ConflictError, ValidationFailed, field_error
from coursehub.models.category import Category
from coursehub.models.training import Training
from coursehub.schemas.category import CategoryCreate, CategoryUpdate


def _ensure_name_free(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Category.id).filter(Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise ValidationFailed(
            "Category with this name already exists",
            errors=[field_error("name", "Category with this name already exists")],
        )


def create_category(db: Session, *, obj_in: CategoryCreate) -> Category:
    _ensure_name_free(db, obj_in.name)
    db_obj = Category(name=obj_in.name, description=obj_in.description)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.get(Category, category_id)


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name).all()


def update_category(db: Session, *, db_obj: Category, obj_in: CategoryUpdate) -> Category:
    update_data = obj_in.model_dump(exclude_unset=True)
    if "name" in update_data:
        _ensure_name_free(db, update_data["name"], exclude_id=db_obj.id)
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_category(db: Session, *, db_obj: Category) -> None:
    in_use = db.query(Training.id).filter(Training.category_id == db_obj.id).first()
    if in_use:
        raise ConflictError("Cannot delete a category that still has trainings")
    db.delete(db_obj)
    db.commit()
