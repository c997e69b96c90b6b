# tests/test_config.py
from __future__ import annotations

import pytest

from combinadic import config as CONFIG
from combinadic.errors import UserInputError
from combinadic.output_manager import OutputManager, validate_output_setting
from combinadic.runtime import APPLY, CFG, current
from combinadic.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


def test_workspace_follows_env(isolated_workspace):
    assert workspace_dir() == isolated_workspace.resolve()


def test_seeding_copies_packaged_profiles():
    root, seeded, copied = ensure_workspace_seeded()
    assert seeded
    assert copied["profiles"] >= 3
    assert (root / "profiles" / "default.toml").exists()
    # second run copies nothing
    _, seeded_again, _ = ensure_workspace_seeded()
    assert not seeded_again
    _, forced = seed_workspace(overwrite=True)
    assert forced["profiles"] == copied["profiles"]


def test_load_default_profile():
    ensure_workspace_seeded()
    s = CONFIG.load_settings(None)
    assert s.name == "default"
    assert s.data["ENGINE"]["WIDTH"] == "int32"
    assert s.data["EXPORT"]["DISPLAY_CHARS"] is None
    assert "PROFILE" not in s.data


def test_profiles_listing():
    ensure_workspace_seeded()
    names = CONFIG.list_all_profiles()
    assert {"default", "poker", "wide"} <= set(names)
    descs = dict(CONFIG.list_profiles_with_descriptions())
    assert "23456789TJQKA" in descs["poker"]


def test_broken_profile_reports_location():
    root, _, _ = ensure_workspace_seeded()
    (root / "profiles" / "broken.toml").write_text("[ENGINE\nWIDTH = 1\n", encoding="utf-8")
    with pytest.raises(UserInputError) as ei:
        CONFIG.load_settings("broken")
    assert "broken.toml" in str(ei.value)


def test_missing_profile():
    ensure_workspace_seeded()
    with pytest.raises(UserInputError):
        CONFIG.load_settings("nope")


def test_current_profile_roundtrip():
    ensure_workspace_seeded()
    assert CONFIG.read_current_profile() is None
    CONFIG.write_current_profile("poker.toml")
    assert CONFIG.read_current_profile() == "poker"


def test_apply_and_dotted_lookup():
    APPLY({"ENGINE": {"WIDTH": "int64"}, "BEHAVIOUR": {"DEBUG": True}, "TOP": 1})
    rt = current()
    assert rt.width == "int64"
    assert rt.debug is True
    assert CFG("ENGINE.WIDTH") == "int64"
    assert CFG("ENGINE.MISSING", "x") == "x"
    assert CFG("TOP") == 1


@pytest.mark.parametrize("bad", ["run.py", "notes.md", "NUL", "pyproject.toml"])
def test_forbidden_output_names(bad):
    with pytest.raises(ValueError):
        validate_output_setting(bad)


def test_output_manager_single_file(isolated_workspace):
    with OutputManager(output_file="out/log.txt", quiet=True) as om:
        om.write("\x1b[33mhello\x1b[0m")
    text = (isolated_workspace / "out" / "log.txt").read_text(encoding="utf-8")
    assert text == "hello\n\n"


def test_output_manager_split_mode(isolated_workspace):
    with OutputManager(output_file="exports/", quiet=True, name="7C3") as om:
        om.write("a")
        om.write("b")
    assert (isolated_workspace / "exports" / "7C3.txt").read_text(encoding="utf-8") == "a\nb\n"


def test_apply_profile_settings():
    ensure_workspace_seeded()
    APPLY(CONFIG.load_settings("wide"))
    rt = current()
    assert rt.profile_name == "wide"
    assert rt.width == "int64"
    assert CFG("BEHAVIOUR.MAX_LIST") == 10000
