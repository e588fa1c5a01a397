from fastapi import APIRouter

from visitor_training.api.routes import training

api_router = APIRouter()


api_router.include_router(training.router)
