"""Jinja2-related constants for TagFlow."""

# Template rendering the tracking code for a page.
ANALYTICS_CODE_TEMPLATE = "analytics_code.html.j2"

# Package holding the bundled templates.
TEMPLATES_PACKAGE = "tagflow.j2"
TEMPLATES_DIR = "templates"
