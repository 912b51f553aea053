import logging
from typing import Annotated
from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import schemas, models
from app.core.database import get_db
from app.core.security import (
    authenticate_operator,
    create_access_token,
    find_operator,
    hash_password,
)

router = APIRouter(prefix="/profile", tags=["Authentication"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


# New operators always start as plain users; admins are promoted in the database
@router.post(
    "/signup",
    response_model=schemas.UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def sign_up(user: schemas.CreateUser, db: db_dep):
    if await find_operator(db, email=user.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="User already exists"
        )

    operator = models.User(
        email=user.email,
        password=hash_password(user.password),
        role=schemas.UserRole.USER.value,
    )
    try:
        db.add(operator)
        await db.commit()
        await db.refresh(operator)
    except SQLAlchemyError as error:
        await db.rollback()
        logging.error(f"Failed to add a new operator: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sign up",
        )
    return operator


@router.post("/login", status_code=status.HTTP_200_OK)
async def login(credentials: schemas.UserLogin, db: db_dep):
    operator = await authenticate_operator(db, credentials.email, credentials.password)
    if operator is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    token = create_access_token({"user_id": operator.id, "role": operator.role})
    return {"access_token": token, "token_type": "bearer"}
