from fastapi import APIRouter

from src.frontdoor.api.routes import admin, projects

api_router = APIRouter()
api_router.include_router(projects.router)
api_router.include_router(admin.router)
