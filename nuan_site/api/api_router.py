from fastapi import APIRouter
from nuan_site.api.endpoints import pages, contact

api_router = APIRouter()

api_router.include_router(pages.router, tags=["Pages"])
api_router.include_router(contact.router, tags=["Contact"])
