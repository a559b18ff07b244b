import os
from datetime import datetime
from fastapi.templating import Jinja2Templates

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "..", "templates")
STATIC_DIR = os.path.join(os.path.dirname(__file__), "..", "static")

templates = Jinja2Templates(directory=TEMPLATE_DIR)
templates.env.globals["current_year"] = lambda: datetime.now().year


def render_email(template_name: str, **context) -> str:
    """Render one of the templates under ``templates/emails/`` to an HTML string"""
    template = templates.env.get_template(f"emails/{template_name}")
    return template.render(**context)
