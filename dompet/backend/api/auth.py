"""
Authentication API endpoints
Email/password registration and login
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dompet import fields
from dompet.auth import AuthManager
from dompet.database import FinanceDatabase
from dompet.backend.api.common import ClientModel
from dompet.backend.dependencies import get_db

router = APIRouter()


class RegisterRequest(ClientModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(ClientModel):
    email: Optional[str] = None
    password: Optional[str] = None


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: FinanceDatabase = Depends(get_db)):
    """Register new user with the default categories"""
    success, message, user = AuthManager(db).register(request.email, request.password, request.name)
    if not success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return {"user": fields.USER.to_client(user)}


@router.post("/login")
async def login(request: LoginRequest, db: FinanceDatabase = Depends(get_db)):
    """Check credentials and return the user"""
    if not request.email or not request.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email dan password harus diisi")

    success, message, user = AuthManager(db).authenticate(request.email, request.password)
    if not success:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)
    return {"user": fields.USER.to_client(user)}
