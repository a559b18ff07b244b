"""
Request-scoped models for the contact form pipeline.

Nothing here is persisted: every instance is built while handling one
POST /contact-us and discarded once the page is rendered.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict, Any, Union, Mapping

# Field name -> error message. Empty means the submission is valid.
ValidationResult = Dict[str, str]

SINGLE_VALUE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "newsletter",
    "referral",
    "message",
    "recaptcha_token",
)

FALSE_CHECKBOX_VALUES = {"", "false", "off", "0", "no"}


class MalformedSubmission(ValueError):
    """Raised when the posted body cannot be read as a contact form"""

    def __init__(self, msg="The form could not be read. Please try again.", field=None):
        self.msg = msg
        self.field = field
        super().__init__(self.msg)


class SubmissionInput(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: Optional[str] = None
    newsletter: bool = False
    service: Union[str, List[str], None] = None
    referral: Optional[str] = None
    message: str = ""
    recaptcha_token: Optional[str] = None

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "SubmissionInput":
        """
        Build a submission from url-encoded form fields.

        ``form`` is a Starlette ``FormData`` (anything with ``getlist`` works).
        Missing text fields become empty strings and are reported by the
        validator; a field that should be single-valued but arrives more than
        once, or an uploaded file, is rejected with ``MalformedSubmission``.
        """
        if not hasattr(form, "getlist"):
            raise MalformedSubmission()

        values: Dict[str, Any] = {}
        for name in SINGLE_VALUE_FIELDS:
            items = form.getlist(name)
            if len(items) > 1:
                raise MalformedSubmission(f"Field '{name}' was submitted more than once", field=name)
            if items and not isinstance(items[0], str):
                raise MalformedSubmission(f"Field '{name}' must be text", field=name)
            values[name] = items[0] if items else None

        services = form.getlist("service")
        if any(not isinstance(item, str) for item in services):
            raise MalformedSubmission("Field 'service' must be text", field="service")

        newsletter_raw = values["newsletter"]
        return cls(
            first_name=values["first_name"] or "",
            last_name=values["last_name"] or "",
            email=values["email"] or "",
            phone=values["phone"] or None,
            newsletter=newsletter_raw is not None and newsletter_raw.strip().lower() not in FALSE_CHECKBOX_VALUES,
            service=services if len(services) > 1 else (services[0] if services else None),
            referral=values["referral"] or None,
            message=values["message"] or "",
            recaptcha_token=values["recaptcha_token"] or None,
        )

    def form_data(self) -> Dict[str, Any]:
        """Values echoed back into the form when it is redisplayed"""
        return self.model_dump(exclude={"recaptcha_token"})

    @property
    def services_display(self) -> str:
        if isinstance(self.service, list):
            return ", ".join(self.service) if self.service else "None"
        return self.service or "None"


class VerificationOutcome(BaseModel):
    passed: bool
    score: Optional[float] = None
    reason: Optional[str] = None


class EmailContact(BaseModel):
    email: EmailStr
    name: Optional[str] = None


class EmailMessage(BaseModel):
    sender: EmailContact
    recipient: EmailContact
    subject: str
    html_content: str


class SendResult(BaseModel):
    """Outcome of the email step. A failure here stops the pipeline."""
    ok: bool
    error: Optional[str] = None


class SubscriptionRequest(BaseModel):
    email: str
    first_name: str
    last_name: str
    status: str = "subscribed"


class SubscriptionResult(BaseModel):
    """Outcome of the best-effort newsletter step. Never changes the response."""
    attempted: bool = True
    ok: bool = False
    error: Optional[str] = None


class SubmissionResult(BaseModel):
    status_code: int
    errors: ValidationResult = Field(default_factory=dict)
    form_data: Dict[str, Any] = Field(default_factory=dict)
    success_message: Optional[str] = None
    verification: Optional[VerificationOutcome] = None
    email: Optional[SendResult] = None
    subscription: Optional[SubscriptionResult] = None
