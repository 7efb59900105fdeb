from threading import Lock
from typing import Any, TYPE_CHECKING

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateNotFound, select_autoescape
from jinja2 import TemplateError as Jinja2TemplateError

from tagflow.j2.constants import ANALYTICS_CODE_TEMPLATE, TEMPLATES_DIR, TEMPLATES_PACKAGE
from tagflow.j2.exceptions import TemplateError
from tagflow.logger import logger

if TYPE_CHECKING:
    from tagflow.formatter import DisplayPayload


class Jinja2Service:
    """Centralized Jinja2 management for TagFlow markup.

    A thread-safe singleton holding the environment that renders the bundled
    HTML templates. Autoescaping is on: URLs and versions are escaped in
    attributes, while the formatted variables block is inserted as-is since
    its values were sanitized during token resolution.
    """

    _instance = None
    _lock = Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance.environment = Environment(
                        loader=PackageLoader(TEMPLATES_PACKAGE, TEMPLATES_DIR),
                        undefined=StrictUndefined,
                        autoescape=select_autoescape(["html", "html.j2"]),
                        keep_trailing_newline=True,
                    )
                    cls._instance = instance
        return cls._instance

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a bundled template.

        Raises:
            TemplateError: If the template is missing or fails to render.
        """
        try:
            template = self.environment.get_template(template_name)
            return template.render(context)
        except TemplateNotFound as e:
            raise TemplateError("Template not found.", template_name) from e
        except Jinja2TemplateError as e:
            logger.error(f"Failed rendering {template_name}: {e}")
            raise TemplateError(f"Template rendering error: {e}", template_name) from e

    def render_payload(self, payload: "DisplayPayload") -> str:
        """Render the HTML fragment carrying the tracking code for a page."""
        return self.render(ANALYTICS_CODE_TEMPLATE, {"payload": payload})
