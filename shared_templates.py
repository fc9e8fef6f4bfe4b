"""
shared_templates.py

Responsibility: Provides the single shared Jinja2Templates instance used by
route handlers, with application-wide globals (e.g. APP_VERSION) pre-set.

Does NOT: define routes, services, or any business logic.
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates

# ---------------------------------------------------------------------------
# Application version, update here on every release
# ---------------------------------------------------------------------------

APP_VERSION = "v1.0.0"

# Resolved relative to this file so the app can start from any working directory.
_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(_TEMPLATE_DIR))
templates.env.globals["app_version"] = APP_VERSION
