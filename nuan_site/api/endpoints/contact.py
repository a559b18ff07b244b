"""
Contact page routes.

GET renders an empty form. POST runs the submission pipeline and re-renders
the same template with whatever the pipeline produced: errors and the
submitted values on failure, a success message and a blank form on success.
"""

from fastapi import APIRouter, Depends, Request, status
from typing import Dict, Any, Optional
import logging
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from nuan_site.core.contact_flow import ContactFlow
from nuan_site.core.templating import templates
from nuan_site.models.contact import MalformedSubmission, SubmissionInput

router = APIRouter()
logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_contact_flow(request: Request) -> ContactFlow:
    return request.app.state.contact_flow


def render_contact(
    request: Request,
    status_code: int = status.HTTP_200_OK,
    errors: Optional[Dict[str, str]] = None,
    form_data: Optional[Dict[str, Any]] = None,
    success_message: Optional[str] = None,
):
    return templates.TemplateResponse(
        request,
        "contact.html",
        {
            "title": "Contact Us",
            "errors": errors or {},
            "form_data": form_data or {},
            "success_message": success_message,
            "recaptcha_site_key": request.app.state.settings.recaptcha_site_key,
        },
        status_code=status_code,
    )


@router.get("/contact-us", include_in_schema=False)
async def contact_form(request: Request):
    return render_contact(request)


@router.post("/contact-us", include_in_schema=False)
async def submit_contact_form(request: Request, flow: ContactFlow = Depends(get_contact_flow)):
    """
    Handle a contact form submission.

    Returns:
        200 with a cleared form, 400 when validation or reCAPTCHA fails,
        500 when the notification email could not be sent
    """
    try:
        content_type = request.headers.get("content-type", "").strip().lower()
        if not content_type.startswith(FORM_CONTENT_TYPES):
            raise MalformedSubmission()
        try:
            form = await request.form()
        except (StarletteHTTPException, MultiPartException) as e:
            raise MalformedSubmission() from e
        submission = SubmissionInput.from_form(form)
    except MalformedSubmission as e:
        logger.warning(f"Unreadable contact form submission: {e.msg}")
        return render_contact(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            errors={"form": e.msg},
        )

    result = await flow.submit(submission)
    return render_contact(
        request,
        status_code=result.status_code,
        errors=result.errors,
        form_data=result.form_data,
        success_message=result.success_message,
    )
