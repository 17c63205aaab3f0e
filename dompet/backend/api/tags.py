"""
Tags API endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from dompet import fields
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel, require_fields, sparse_columns, not_found
from dompet.backend.dependencies import get_db, get_query_user_id

router = APIRouter()


class TagCreate(ClientModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None


class TagUpdate(ClientModel):
    name: Optional[str] = None
    color: Optional[str] = None


@router.get("/")
async def get_tags(user_id: str = Depends(get_query_user_id), db: FinanceDatabase = Depends(get_db)):
    """Get the owner's tags alphabetically"""
    return {"tags": [fields.TAG.to_client(t) for t in db.tags.list(user_id)]}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_tag(tag: TagCreate, db: FinanceDatabase = Depends(get_db)):
    """Create new tag"""
    require_fields(userId=tag.user_id, name=tag.name)

    row = db.tags.add({
        'user_id': tag.user_id,
        'name': tag.name.strip(),
        'color': tag.color or '#8b5cf6',
    })
    return fields.TAG.to_client(row)


@router.put("/{tag_id}")
async def update_tag(tag_id: str, tag: TagUpdate, db: FinanceDatabase = Depends(get_db)):
    """Rename or recolour tag"""
    updated = db.tags.update(tag_id, sparse_columns(tag, fields.TAG))
    if not updated:
        raise not_found("Tag")
    return fields.TAG.to_client(updated)


@router.delete("/{tag_id}")
async def delete_tag(tag_id: str, db: FinanceDatabase = Depends(get_db)):
    """Delete tag"""
    if not db.tags.delete(tag_id):
        raise not_found("Tag")
    return {"message": "Tag deleted successfully"}
