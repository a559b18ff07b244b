"""
Field validation for the contact form.

Every rule trims the value first; name and message fields are HTML-escaped
before their length checks, and the email address is normalised before the
grammar check. Errors come back as a plain dict, nothing here raises.
"""

import logging
from typing import Optional, Tuple
from email_validator import validate_email, EmailNotValidError
from nuan_site.models.contact import SubmissionInput, ValidationResult

logger = logging.getLogger(__name__)

HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "\"": "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
})

GMAIL_DOMAINS = {"gmail.com", "googlemail.com"}
OUTLOOK_DOMAINS = {"hotmail.com", "live.com", "outlook.com", "msn.com", "passport.com"}
YAHOO_DOMAINS = {"yahoo.com", "ymail.com", "rocketmail.com"}
ICLOUD_DOMAINS = {"icloud.com", "me.com", "mac.com"}


def escape_html(value: str) -> str:
    return value.translate(HTML_ESCAPES)


def normalize_email(value: str) -> Optional[str]:
    """
    Lower-case an address and strip provider-specific aliases.

    Returns None when the value has no usable ``local@domain`` shape.
    """
    if value.count("@") < 1:
        return None
    local, domain = value.rsplit("@", 1)
    if not local or not domain:
        return None

    local = local.lower()
    domain = domain.lower()

    if domain in GMAIL_DOMAINS:
        local = local.split("+", 1)[0].replace(".", "")
        domain = "gmail.com"
    elif domain in OUTLOOK_DOMAINS or domain in ICLOUD_DOMAINS:
        local = local.split("+", 1)[0]
    elif domain in YAHOO_DOMAINS:
        local = local.split("-", 1)[0]

    if not local:
        return None
    return f"{local}@{domain}"


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        logger.debug(f"Rejected email address: {str(e)}")
        return False
    return True


def validate_submission(submission: SubmissionInput) -> Tuple[SubmissionInput, ValidationResult]:
    """
    Sanitise a submission and collect field errors.

    Returns the sanitised copy (what gets emailed and echoed back) together
    with the error mapping.
    """
    errors: ValidationResult = {}

    first_name = escape_html(submission.first_name.strip())
    if not first_name:
        errors["first_name"] = "First name is required"
    elif len(first_name) < 3:
        errors["first_name"] = "First name must be at least 3 characters long"

    last_name = escape_html(submission.last_name.strip())
    if not last_name:
        errors["last_name"] = "Last name is required"
    elif len(last_name) < 2:
        errors["last_name"] = "Last name must be at least 2 characters long"

    email = submission.email.strip()
    normalized = normalize_email(email)
    if normalized is None or not is_valid_email(normalized):
        errors["email"] = "Email is not valid"
    else:
        email = normalized

    message = escape_html(submission.message.strip())
    if not message:
        errors["message"] = "Message is required"

    sanitized = submission.model_copy(update={
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "message": message,
    })
    return sanitized, errors
