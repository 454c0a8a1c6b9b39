from __future__ import annotations

import pytest

from quizmaster.core import config as core_config


def test_load_toml_reads_tables(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[play]\nfast_mode = true\n', encoding="utf-8")

    assert core_config.load_toml(path) == {"play": {"fast_mode": True}}


def test_load_toml_missing_file(tmp_path):
    with pytest.raises(core_config.TomlConfigError, match="not found"):
        core_config.load_toml(tmp_path / "missing.toml")


def test_load_toml_invalid_document(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("[play\n", encoding="utf-8")

    with pytest.raises(core_config.TomlConfigError, match="Failed to parse"):
        core_config.load_toml(path)


def test_merge_defaults_overrides_nested_values():
    base = {"play": {"fast_mode": False, "shuffle_answers": True}}

    core_config.merge_defaults(base, {"play": {"fast_mode": True}})

    assert base == {"play": {"fast_mode": True, "shuffle_answers": True}}


@pytest.mark.parametrize(
    "override, message",
    [
        ({"unknown": 1}, "Unknown configuration key 'unknown'"),
        ({"play": {"typo": True}}, "Unknown configuration key 'play.typo'"),
        ({"play": 3}, "Expected table for 'play'"),
        ({"play": {"fast_mode": "yes"}}, "Expected boolean for 'play.fast_mode'"),
    ],
)
def test_merge_defaults_rejects_invalid_overrides(override, message):
    base = {"play": {"fast_mode": False}}

    with pytest.raises(core_config.TomlConfigError, match=message):
        core_config.merge_defaults(base, override)


def test_merge_defaults_keeps_scalar_types():
    base = {"logging": {"level": "INFO"}}

    with pytest.raises(
        core_config.TomlConfigError,
        match="Expected string for 'logging.level', found int",
    ):
        core_config.merge_defaults(base, {"logging": {"level": 10}})

    core_config.merge_defaults(base, {"logging": {"level": "debug"}})
    assert base == {"logging": {"level": "debug"}}


def test_write_toml_template_honours_overwrite(tmp_path):
    target = tmp_path / "nested" / "quizmaster.toml"

    written = core_config.write_toml_template(target, template="a = 1\n")
    assert written == target
    assert target.read_text(encoding="utf-8") == "a = 1\n"

    with pytest.raises(core_config.TomlConfigError, match="already exists"):
        core_config.write_toml_template(target, template="a = 2\n")

    core_config.write_toml_template(target, template="a = 2\n", overwrite=True)
    assert target.read_text(encoding="utf-8") == "a = 2\n"
