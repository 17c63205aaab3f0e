"""
Shared FastAPI dependencies: database handle and owner identity
"""
from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException, Query, status

from dompet.config import settings
from dompet.database import FinanceDatabase


@lru_cache(maxsize=1)
def get_db() -> FinanceDatabase:
    """Database for the configured path. Overridden in tests."""
    return FinanceDatabase(
        db_path=settings.database_path,
        transfer_max_retries=settings.transfer_max_retries,
    )


async def get_header_user_id(x_user_id: Optional[str] = Header(None, alias="x-user-id")) -> str:
    """Owner identity from the x-user-id header; 401 when absent."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return x_user_id


async def get_query_user_id(user_id: Optional[str] = Query(None, alias="userId")) -> str:
    """Owner identity from the userId query parameter; 400 when absent."""
    if not user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User ID required")
    return user_id
