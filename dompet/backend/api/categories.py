"""
Categories API endpoints
Income and expense categories per user
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, status

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_header_user_id

router = APIRouter()

DEFAULT_COLOR = "#6366f1"
DEFAULT_ICON = "CircleDollarSign"


class CategoryCreate(ClientModel):
    name: Optional[str] = None
    type: Optional[Literal["income", "expense"]] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class CategoryUpdate(ClientModel):
    name: Optional[str] = None
    type: Optional[Literal["income", "expense"]] = None
    color: Optional[str] = None
    icon: Optional[str] = None


@router.get("/")
async def get_categories(user_id: str = Depends(get_header_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's categories, oldest first"""
    return {"categories": [fields.CATEGORY.to_client(c) for c in db.categories.list(user_id)]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_category(
    category: CategoryCreate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Create new category"""
    require_fields(name=category.name, type=category.type)

    row = db.categories.add({
        'user_id': user_id,
        'name': category.name.strip(),
        'type': category.type,
        'color': category.color or DEFAULT_COLOR,
        'icon': category.icon or DEFAULT_ICON,
    })
    return fields.CATEGORY.to_client(row)


@router.put("/{category_id}")
async def update_category(
    category_id: str,
    category: CategoryUpdate,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Update only the fields present in the request"""
    updated = db.categories.update(category_id, sparse_columns(category, fields.CATEGORY), user_id=user_id)
    if not updated:
        raise not_found("Category")
    return fields.CATEGORY.to_client(updated)


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    user_id: str = Depends(get_header_user_id),
    db: FinanceDatabase = Depends(get_db)
):
    """Delete category"""
    if not db.categories.delete(category_id, user_id=user_id):
        raise not_found("Category")
    return {"message": "Category deleted successfully"}
