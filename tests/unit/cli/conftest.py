import pytest
import yaml
from typer.testing import CliRunner


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_settings_file(tmp_path):
    """A settings file enabling rendering with a main snippet."""
    path = tmp_path / "tagflow.yaml"
    path.write_text(
        yaml.dump(
            {
                "js_file_location": "https://cdn.example.com/s_code.js",
                "version": "H.25",
                "codesnippet": 's.pageName="[node:title]";',
                "extra_variables": [{"name": "s.channel", "value": "[node:type]"}],
                "track_roles": ["administrator"],
            }
        )
    )
    return path


@pytest.fixture
def request_file(tmp_path):
    """A request for /node/7 by an authenticated user."""
    path = tmp_path / "request.yaml"
    path.write_text(
        yaml.dump(
            {
                "path": "/node/7",
                "roles": ["authenticated"],
                "route_parameters": {"node": 7},
                "entities": {
                    "node": {
                        7: {"title": "Seven", "type": "page"},
                        8: {"title": "Eight", "type": "article"},
                    }
                },
            }
        )
    )
    return path
