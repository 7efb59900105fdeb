"""TagFlow Jinja2 package.

Renders the display payload of a page into its HTML tracking fragment.
"""

from tagflow.j2.core import Jinja2Service
from tagflow.j2.exceptions import Jinja2ServiceError, TemplateError

__all__ = [
    "Jinja2Service",
    "Jinja2ServiceError",
    "TemplateError",
]
