from unittest.mock import MagicMock

import pytest

from tagflow.access.base import MATCHER_REGISTRY
from tagflow.request import StaticRequest
from tagflow.settings import TagFlowSettings
from tagflow.vars.contributors import CONTRIBUTOR_REGISTRY


@pytest.fixture(autouse=True)
def isolated_registries():
    """Undo registrations made by classes defined inside a test."""
    matchers = dict(MATCHER_REGISTRY)
    contributors = dict(CONTRIBUTOR_REGISTRY)
    yield
    MATCHER_REGISTRY.clear()
    MATCHER_REGISTRY.update(matchers)
    CONTRIBUTOR_REGISTRY.clear()
    CONTRIBUTOR_REGISTRY.update(contributors)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep TAGFLOW_SETTINGS* variables of the developer's shell out of the tests."""
    monkeypatch.delenv("TAGFLOW_SETTINGS", raising=False)
    for name in ("JS_FILE_LOCATION", "VERSION", "TRACK_ROLES", "ROLE_TRACKING_TYPE", "MATCHERS"):
        monkeypatch.delenv(f"TAGFLOW_SETTINGS_{name}", raising=False)


@pytest.fixture
def configured_settings():
    """Settings with both values required for rendering."""
    return TagFlowSettings(
        js_file_location="https://cdn.example.com/s_code.js",
        version="H.25",
    )


@pytest.fixture
def unconfigured_settings():
    """Settings missing the script version."""
    return TagFlowSettings(js_file_location="https://cdn.example.com/s_code.js")


@pytest.fixture
def node_request():
    """A request for /node/12 with one article and one taxonomy term."""
    return StaticRequest(
        path="/node/12",
        roles=["authenticated"],
        route_parameters={"node": 12},
        routes={"/taxonomy/term/3": {"taxonomy_term": 3}},
        entities={
            "node": {
                12: {
                    "title": "Hello <World>",
                    "type": "article",
                    "field_analytics": [
                        {
                            "include_main_codesnippet": True,
                            "include_custom_variables": True,
                            "codesnippet": 's.prop9="[node:type]";',
                        }
                    ],
                }
            },
            "taxonomy_term": {3: {"name": "News"}},
        },
        field_map={"adobe_analytics": {"node": "field_analytics"}},
    )


@pytest.fixture
def mock_resolver():
    """A resolver returning every text unchanged."""
    resolver = MagicMock()
    resolver.resolve.side_effect = lambda text, overrides=None: text
    return resolver


@pytest.fixture
def settings_file(tmp_path):
    """Write a settings YAML file and return its path."""

    def _write(content: str):
        path = tmp_path / "tagflow.yaml"
        path.write_text(content)
        return path

    return _write
