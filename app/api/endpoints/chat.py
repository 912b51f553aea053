import logging
from typing import Annotated
from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.ai_feature.service import (
    GenerationServiceError,
    TextGenerator,
    get_generation_client,
)
from app.core import schemas, models
from app.core.database import get_db
from app.core.chat import pipeline
from app.core.chat.retrieval import RetrievalError, SqlAlchemyQueryExecutor

router = APIRouter(prefix="/chat", tags=["Chat"])

db_dep = Annotated[AsyncSession, Depends(get_db)]
generator_dep = Annotated[TextGenerator, Depends(get_generation_client)]


async def log_conversation(db: AsyncSession, result: pipeline.ChatResult):
    """Append the exchange to the conversation log. A failed write never fails the answer."""
    try:
        db.add(
            models.ConversationLog(
                message=result.message,
                response=result.response,
                is_related=result.intent.is_related,
                is_in_need=result.intent.is_in_need,
                is_detailed=result.intent.is_detailed,
            )
        )
        await db.commit()
    except SQLAlchemyError as error:
        await db.rollback()
        logging.error(f"Failed to append conversation log: {error}")


@router.post("", response_model=schemas.ChatResponse)
async def chat(request: schemas.ChatRequest, db: db_dep, generator: generator_dep):
    """
    Answer one free-text question about the statistics tables.
    """
    executor = SqlAlchemyQueryExecutor(db)

    try:
        result = await pipeline.answer_message(request.message, executor, generator)
    except RetrievalError as error:
        logging.error(f"Chat retrieval failed: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch data",
        )
    except GenerationServiceError as error:
        logging.error(f"Generation service failed: {error} ({error.status_code})")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": "Generation service error", "raw": error.raw},
        )

    await log_conversation(db, result)
    return {"response": result.response}
