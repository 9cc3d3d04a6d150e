from fastapi import APIRouter

# Import all the individual routers
from . import core, directional, surveys, wells

api_router = APIRouter()
api_router.include_router(core.router, prefix="/core", tags=["core"])
api_router.include_router(directional.router, prefix="/directional", tags=["directional"])
api_router.include_router(surveys.router, prefix="/surveys", tags=["surveys"])
api_router.include_router(wells.router, prefix="/wells", tags=["wells"])
