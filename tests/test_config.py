import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from gitrelease.config import (
    GitSettings,
    ReleaseConfig,
    load_config_file,
    merge_settings,
    read_git_settings,
    try_load_default,
)
from gitrelease.errors import ConfigError


class _ConfigGit:
    def __init__(self, values: Dict[str, List[str]], git_dir: str = ".git") -> None:
        self.values = values
        self._git_dir = git_dir

    def config_get(self, key: str) -> Optional[str]:
        found = self.values.get(key)
        return found[-1] if found else None

    def config_get_all(self, key: str) -> List[str]:
        return list(self.values.get(key, []))

    def git_dir(self) -> str:
        return self._git_dir


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / ".release.yml"
    path.write_text("targets: package.json:3\npush: true\ntag_prefix: release-\n", encoding="utf-8")
    cfg = load_config_file(str(path))
    assert cfg.targets == ["package.json:3"]
    assert cfg.push is True
    assert cfg.tag_prefix == "release-"
    assert cfg.remote == "origin"


def test_load_json_config_rejects_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "release.json"
    path.write_text(json.dumps({"targets": [], "pushh": True}), encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_file(str(path))


def test_try_load_default(tmp_path: Path) -> None:
    assert try_load_default(str(tmp_path)) is None
    (tmp_path / ".release.json").write_text(json.dumps({"commit_message": "chore: {version}"}), encoding="utf-8")
    cfg = try_load_default(str(tmp_path))
    assert cfg is not None
    assert cfg.commit_message == "chore: {version}"


def test_read_git_settings() -> None:
    git = _ConfigGit(
        {
            "release.target": ["package.json:3", "README.md:5"],
            "release.push": ["true"],
            "release.publish": ["yes"],
            "release.test": ["false"],
        }
    )
    settings = read_git_settings(git)  # type: ignore[arg-type]
    assert settings.targets == ["package.json:3", "README.md:5"]
    assert settings.push is True
    # only the literal "true" enables
    assert settings.publish is False
    assert settings.test is False


def test_read_git_settings_from_file(tmp_path: Path) -> None:
    (tmp_path / "config").write_text("[release]\n\ttarget = a.txt:1\n\tpush = true\n", encoding="utf-8")
    settings = read_git_settings(_ConfigGit({}, git_dir=str(tmp_path)), from_file=True)  # type: ignore[arg-type]
    assert settings.targets == ["a.txt:1"]
    assert settings.push is True


def test_git_settings_override_release_file() -> None:
    file_cfg = ReleaseConfig(targets=["VERSION:1"], push=True, test=False, remote="upstream")
    merged = merge_settings(GitSettings(targets=["package.json:3"], push=False), file_cfg)
    assert merged.targets == ["package.json:3"]
    assert merged.push is False
    assert merged.test is False
    assert merged.remote == "upstream"

    merged = merge_settings(GitSettings(), file_cfg)
    assert merged.targets == ["VERSION:1"]
    assert merged.push is True
