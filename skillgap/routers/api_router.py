from fastapi import APIRouter
from skillgap.routers import responses, form_schemas, analytics

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(responses.router)
api_router.include_router(form_schemas.router)
api_router.include_router(analytics.router)
