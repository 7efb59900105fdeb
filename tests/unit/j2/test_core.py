"""Unit tests for tagflow.j2.core module."""

from unittest.mock import patch

import pytest
from jinja2 import Environment, StrictUndefined

from tagflow.formatter import DisplayPayload
from tagflow.j2 import Jinja2Service
from tagflow.j2.exceptions import TemplateError


@pytest.fixture
def payload():
    return DisplayPayload(
        script_url="https://cdn.example.com/s_code.js?a=1&b=2",
        script_version="H.25",
        formatted_variables='s.pageName="Home";\n',
    )


class TestJinja2Service:
    """Test suite for Jinja2Service singleton."""

    def test_singleton_behavior(self):
        """Test that Jinja2Service is a singleton."""
        assert Jinja2Service() is Jinja2Service()

    def test_environment(self):
        env = Jinja2Service().environment

        assert isinstance(env, Environment)
        assert env.undefined is StrictUndefined

    def test_render_payload(self, payload):
        html = Jinja2Service().render_payload(payload)

        assert html.startswith("<!-- Analytics tracking code version: H.25 -->\n")
        assert '<script src="https://cdn.example.com/s_code.js?a=1&amp;b=2"></script>' in html
        assert 's.pageName="Home";\nvar s_code=s.t();' in html
        assert "<noscript>" not in html
        assert html.rstrip().endswith("<!-- End analytics tracking code version: H.25 -->")

    def test_render_payload_with_image(self, payload):
        payload = payload.model_copy(update={"image_url": "https://metrics.example.com/b/ss/1"})

        html = Jinja2Service().render_payload(payload)

        assert '<noscript><img src="https://metrics.example.com/b/ss/1" height="1" width="1" alt="" /></noscript>' in html

    def test_formatted_variables_are_not_escaped_again(self, payload):
        payload = payload.model_copy(update={"formatted_variables": 's.pageName="A &amp; B";\n'})

        assert 's.pageName="A &amp; B";' in Jinja2Service().render_payload(payload)

    def test_template_not_found(self):
        with pytest.raises(TemplateError, match="Template not found. Template: 'missing.html.j2'"):
            Jinja2Service().render("missing.html.j2", {})

    def test_render_error_is_wrapped(self):
        with patch("tagflow.j2.core.logger") as mock_logger:
            with pytest.raises(TemplateError, match="Template rendering error"):
                Jinja2Service().render("analytics_code.html.j2", {})

        mock_logger.error.assert_called_once()
