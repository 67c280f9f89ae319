# coursehub/schemas/category.py
from pydantic import BaseModel, field_validator


def _clean_name(v: str | None) -> str:
    if v is None or not v.strip():
        raise ValueError("Category name is required")
    return v.strip()


class CategoryBase(BaseModel):
    name: str
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _clean_name(v)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: str | None = None
    description: str | None = None

    # only runs when the client sends "name"; null or blank is rejected
    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str:
        return _clean_name(v)


class CategoryPublic(CategoryBase):
    id: int

    model_config = {"from_attributes": True}


class CategoryUpdated(BaseModel):
    message: str
    category: CategoryPublic
