import pytest

from issue_rollup.core.config import RollupSettings, load_settings


def test_defaults_without_file(tmp_path):
    settings = load_settings(tmp_path / "missing.yaml")
    assert settings == RollupSettings()
    assert settings.all_areas_label == "Area - All"
    assert settings.backlog_milestone == "Backlog"
    assert settings.tz.zone == "UTC"


def test_yaml_values_and_overrides(tmp_path):
    path = tmp_path / "rollup.yaml"
    path.write_text("rollup:\n  backlog_milestone: Someday\n  timezone: America/Santiago\n  top_n: 10\n")
    settings = load_settings(path, merge_policy="upsert", top_n=None)
    assert settings.backlog_milestone == "Someday"
    assert settings.timezone == "America/Santiago"
    assert settings.top_n == 10
    assert settings.merge_policy == "upsert"


@pytest.mark.parametrize(
    "body",
    [
        "rollup:\n  backlog: Someday\n",
        "rollup:\n  merge_policy: replace\n",
        "rollup:\n  timezone: Mars/Olympus\n",
        "rollup:\n  window_days: 0\n",
        "rollup: [1, 2]\n",
    ],
)
def test_invalid_settings_rejected(tmp_path, body):
    path = tmp_path / "rollup.yaml"
    path.write_text(body)
    with pytest.raises(ValueError):
        load_settings(path)


def test_yaml_read_as_utf8(tmp_path):
    path = tmp_path / "rollup.yaml"
    path.write_bytes("rollup:\n  backlog_milestone: Rückstand\n".encode("utf-8"))
    assert load_settings(path).backlog_milestone == "Rückstand"
