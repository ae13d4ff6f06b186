"""
CLI Tests

Network is replaced by a mock transport injected through create_resolver.
"""

import json
from unittest.mock import patch

import pytest

from activity_loader import SourceResolver, cli
from activity_loader.config import LoaderConfig


PAGE = (
    '<html><body><div class="activity-container"></div>'
    '<div id="load-more-container"></div><div id="collapse-container"></div></body></html>'
)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"visible_threshold": 2}), encoding="utf-8")
    return path


def patched_resolver(r, sources):
    def _create(config: LoaderConfig):
        return SourceResolver(sources, r.fetcher())
    return _create


def test_fetch_prints_records(routes, sources, make_activities, config_file, capsys):
    r = routes(static=make_activities(2))
    with patch("activity_loader.cli.create_resolver", patched_resolver(r, sources)):
        code = cli.main(["--config", str(config_file), "fetch"])

    assert code == 0
    printed = json.loads(capsys.readouterr().out)
    assert [a["title"] for a in printed] == ["Activity 0", "Activity 1"]


def test_fetch_failure_exit_code(routes, sources, config_file):
    r = routes(static=[], fallback=[])
    with patch("activity_loader.cli.create_resolver", patched_resolver(r, sources)):
        assert cli.main(["--config", str(config_file), "fetch"]) == 1


def test_render_writes_page(routes, sources, make_activities, config_file, tmp_path):
    page = tmp_path / "index.html"
    page.write_text(PAGE, encoding="utf-8")
    out = tmp_path / "out.html"
    r = routes(static=make_activities(4))

    with patch("activity_loader.loader.create_resolver", patched_resolver(r, sources)):
        code = cli.main(["--config", str(config_file), "render", str(page), "-o", str(out), "--expand"])

    assert code == 0
    html = out.read_text(encoding="utf-8")
    assert html.count('class="activity-item"') == 4
    assert "hidden-activity" not in html


def test_bad_config_exit_code(tmp_path):
    assert cli.main(["--config", str(tmp_path / "missing.json"), "fetch"]) == 2
