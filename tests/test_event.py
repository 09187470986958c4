import logging

import pytest

from opstrails_track_event.config import ActionConfig
from opstrails_track_event.event import build_event, build_event_data, resolve_source


def make_config(**inputs) -> ActionConfig:
    inputs.setdefault("repository", "OpsTrails/my-app")
    return ActionConfig(api_key="ot_test", type="deployment", **inputs)


def test_required_inputs_only():
    assert build_event(make_config()) == {
        "specversion": "1.0",
        "type": "deployment",
        "source": "//github.com/OpsTrails/my-app",
        "time": "NOW",
    }


def test_all_optional_fields():
    event = build_event(ActionConfig(
        api_key="ot_test",
        type="rollback",
        subject="production",
        version="v1.2.3",
        description="Rolling back",
        source="//custom/source",
        severity="MAJOR",
        data='{"reason": "error_spike"}',
        repository="OpsTrails/my-app",
    ))

    assert event == {
        "specversion": "1.0",
        "type": "rollback",
        "source": "//custom/source",
        "time": "NOW",
        "subject": "production",
        "version": "v1.2.3",
        "severity": "MAJOR",
        "data": {"description": "Rolling back", "reason": "error_spike"},
    }
    assert list(event) == [
        "specversion", "type", "source", "time", "subject", "version", "severity", "data",
    ]


def test_source_defaults_to_repository():
    assert build_event(make_config(repository="myorg/myrepo"))["source"] == "//github.com/myorg/myrepo"


def test_explicit_source_overrides_repository():
    assert build_event(make_config(source="//gitlab.com/org/repo"))["source"] == "//gitlab.com/org/repo"


def test_source_with_unset_repository():
    assert resolve_source("", "") == "//github.com/"


def test_merges_description_and_data():
    assert build_event_data("A deploy", '{"key": "value"}') == {
        "description": "A deploy",
        "key": "value",
    }


def test_data_key_overrides_description():
    assert build_event_data("A deploy", '{"description": "override"}') == {"description": "override"}


def test_no_data_without_description_or_data():
    assert build_event_data("", "") is None
    assert "data" not in build_event(make_config())


def test_invalid_json_data_is_ignored_with_warning(caplog):
    with caplog.at_level(logging.WARNING):
        data = build_event_data("", "not-json")

    assert data == {}
    assert "Failed to parse 'data' input as JSON, ignoring: not-json" in caplog.text


@pytest.mark.parametrize("raw", ['"just a string"', "42", "null", "[1, 2]"])
def test_non_object_json_data_is_ignored(raw, caplog):
    with caplog.at_level(logging.WARNING):
        data = build_event_data("test", raw)

    assert data == {"description": "test"}
    assert raw in caplog.text


def test_nested_data_is_kept():
    data = build_event_data("", '{"build": {"number": 7, "tags": ["a", "b"]}}')
    assert data == {"build": {"number": 7, "tags": ["a", "b"]}}
