"""Jinja2-specific exceptions for TagFlow."""

from tagflow.exceptions import TagFlowError


class Jinja2ServiceError(TagFlowError):
    """Base exception for Jinja2Service-related errors."""


class TemplateError(Jinja2ServiceError):
    """
    Exception class for template rendering errors.
    """

    def __init__(self, message: str = "", template: str = ""):
        super().__init__(f"{message} Template: '{template}'" if template else message)
        self.template = template
