import logging
from typing import Annotated, List
from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError

from app.core import schemas, models
from app.core.database import get_db
from app.core.security import validate_admin_role

router = APIRouter(prefix="/faq", tags=["FAQ"])

db_dep = Annotated[AsyncSession, Depends(get_db)]
admin_dep = Annotated[models.User, Depends(validate_admin_role)]


@router.get("", response_model=List[schemas.FaqResponse])
async def list_faqs(db: db_dep):
    """Newest questions first."""
    query = select(models.Faq).order_by(desc(models.Faq.id))
    result = await db.execute(query)
    return result.scalars().all()


@router.post(
    "",
    response_model=schemas.FaqResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_faq(faq: schemas.FaqCreate, db: db_dep, admin: admin_dep):
    try:
        entry = models.Faq(question=faq.question, answer=faq.answer)
        db.add(entry)
        await db.commit()
        await db.refresh(entry)
        return entry
    except SQLAlchemyError as error:
        await db.rollback()
        logging.error(f"Failed to save FAQ: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save FAQ",
        )
