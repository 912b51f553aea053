from fastapi import APIRouter
from app.api.endpoints import auth, chat, faq

api_router = APIRouter()

# Combine all sub-routers into one
api_router.include_router(chat.router)
api_router.include_router(faq.router)
api_router.include_router(auth.router)
