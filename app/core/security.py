from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models
from app.core.config import settings
from app.core.database import get_db

db_dep = Annotated[AsyncSession, Depends(get_db)]
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Operators without a token get one from /profile/login
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="profile/login")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(claims: dict) -> str:
    expires_at = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    return jwt.encode(
        {**claims, "exp": expires_at}, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )


def read_operator_id(token: str) -> Optional[int]:
    """Operator id carried by a token, or None when the token is unusable."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    # Bad signature, garbage or expired token
    except jwt.PyJWTError:
        return None
    return claims.get("user_id")


async def find_operator(db: AsyncSession, **filters) -> Optional[models.User]:
    query = select(models.User).filter_by(**filters)
    result = await db.execute(query)
    return result.scalars().first()


async def authenticate_operator(
    db: AsyncSession, email: str, password: str
) -> Optional[models.User]:
    operator = await find_operator(db, email=email)
    if operator is None or not verify_password(password, operator.password):
        return None
    return operator


async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)], db: db_dep):
    operator_id = read_operator_id(token)
    operator = await find_operator(db, id=operator_id) if operator_id else None

    if operator is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return operator


# FAQ writes are reserved for admins
async def validate_admin_role(
    current_user: Annotated[models.User, Depends(get_current_user)],
):
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have enough privileges (Admin only)",
        )
    return current_user
