from fastapi import APIRouter, Request
from nuan_site.core.templating import templates

router = APIRouter()


@router.get("/", include_in_schema=False)
async def home(request: Request):
    return templates.TemplateResponse(request, "index.html", {"title": "Home"})
