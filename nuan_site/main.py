#run it with uvicorn nuan_site.main:app --reload
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv
import httpx
import logging
from nuan_site.api.api_router import api_router
from nuan_site.core.brevo import BrevoMailer
from nuan_site.core.config import Settings, get_settings
from nuan_site.core.contact_flow import ContactFlow
from nuan_site.core.mailchimp import MailchimpSubscriber
from nuan_site.core.recaptcha import RecaptchaVerifier
from nuan_site.core.templating import STATIC_DIR, templates
from nuan_site.models.contact import EmailContact

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def build_contact_flow(settings: Settings, http_client: httpx.AsyncClient) -> ContactFlow:
    """Wire the provider clients with their credentials"""
    operator = None
    if settings.mail_username:
        operator = EmailContact(email=settings.mail_username, name=settings.mail_sender_name)
    else:
        logger.warning("⚠️ MAIL_USERNAME not set - contact notifications cannot be sent")

    return ContactFlow(
        verifier=RecaptchaVerifier(
            http_client,
            secret_key=settings.recaptcha_secret_key,
            min_score=settings.recaptcha_min_score,
        ),
        mailer=BrevoMailer(http_client, api_key=settings.brevo_api_key),
        subscriber=MailchimpSubscriber(
            http_client,
            api_key=settings.mailchimp_api_key,
            list_id=settings.mailchimp_list_id,
            data_center=settings.mailchimp_data_center,
        ),
        operator=operator,
        verify_when_invalid=settings.verify_when_invalid,
    )


def create_app(settings: Optional[Settings] = None, contact_flow: Optional[ContactFlow] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        http_client = None
        if getattr(app.state, "contact_flow", None) is None:
            http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
            app.state.contact_flow = build_contact_flow(settings, http_client)
            logger.info("🚀 Contact form providers initialised")
        try:
            yield
        finally:
            if http_client is not None:
                await http_client.aclose()
                app.state.contact_flow = None
                logger.info("HTTP client closed")

    app = FastAPI(title="Nu'an Colour Website", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.contact_flow = contact_flow

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(api_router)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # Wrong method on a known path gets the same page as an unknown path
        if exc.status_code in (404, 405):
            return templates.TemplateResponse(request, "404.html", {"title": "404"}, status_code=404)
        return await http_exception_handler(request, exc)

    @app.get("/api/health")
    def health_check():
        """
        Health check endpoint.

        Only reports whether each integration is configured, never the values.
        """
        return {
            "status": "ok",
            "integrations": {
                "brevo": bool(settings.brevo_api_key and settings.mail_username),
                "recaptcha": bool(settings.recaptcha_secret_key and settings.recaptcha_site_key),
                "mailchimp": bool(settings.mailchimp_api_key and settings.mailchimp_list_id),
            },
        }

    return app


app = create_app()
