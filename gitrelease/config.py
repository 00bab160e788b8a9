from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from typing import List, Optional

import yaml

from .errors import ConfigError
from .git import Git, read_config_file

DEFAULT_FILES = (".release.yml", ".release.yaml", ".release.json")


@dataclass
class ReleaseConfig:
    targets: List[str] = field(default_factory=list)
    push: Optional[bool] = None
    publish: Optional[bool] = None
    test: Optional[bool] = None
    remote: str = "origin"
    tag_prefix: str = "v"
    commit_message: str = "Version {version}"
    git_command: str = "git"
    npm_command: str = "npm"
    preid: Optional[str] = None


def _field_names() -> List[str]:
    return [f.name for f in fields(ReleaseConfig)]


def load_config_file(path: str) -> ReleaseConfig:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    data = yaml.safe_load(text) if path.endswith((".yaml", ".yml")) else json.loads(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    unknown = sorted(set(data) - set(_field_names()))
    if unknown:
        raise ConfigError(f"{path}: unknown key(s) {', '.join(unknown)}")
    targets = data.get("targets")
    if isinstance(targets, str):
        data["targets"] = [targets]
    elif targets is None:
        data["targets"] = []
    return ReleaseConfig(**data)


def try_load_default(root: str) -> Optional[ReleaseConfig]:
    for name in DEFAULT_FILES:
        p = os.path.join(root, name)
        if os.path.exists(p):
            return load_config_file(p)
    return None


@dataclass
class GitSettings:
    targets: List[str] = field(default_factory=list)
    push: Optional[bool] = None
    publish: Optional[bool] = None
    test: Optional[bool] = None


def _enabled(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value == "true"


def read_git_settings(git: Git, from_file: bool = False) -> GitSettings:
    """Read the ``release.*`` keys from git configuration.

    With ``from_file`` the ``[release]`` section of ``.git/config`` is
    parsed directly; only ``target`` and ``push`` are read that way.
    """
    if from_file:
        targets, push = read_config_file(git.git_dir())
        return GitSettings(targets=targets, push=push)
    test = git.config_get("release.test")
    return GitSettings(
        targets=git.config_get_all("release.target"),
        push=_enabled(git.config_get("release.push")),
        publish=_enabled(git.config_get("release.publish")),
        test=None if test is None else test != "false",
    )


def merge_settings(git_settings: GitSettings, file_cfg: Optional[ReleaseConfig]) -> ReleaseConfig:
    # git configuration overrides the release file
    cfg = file_cfg or ReleaseConfig()
    return ReleaseConfig(
        targets=git_settings.targets or cfg.targets,
        push=git_settings.push if git_settings.push is not None else cfg.push,
        publish=git_settings.publish if git_settings.publish is not None else cfg.publish,
        test=git_settings.test if git_settings.test is not None else cfg.test,
        remote=cfg.remote,
        tag_prefix=cfg.tag_prefix,
        commit_message=cfg.commit_message,
        git_command=cfg.git_command,
        npm_command=cfg.npm_command,
        preid=cfg.preid,
    )


def load_release_file(config_file: Optional[str], root: Optional[str] = None) -> Optional[ReleaseConfig]:
    """Load an explicit release file, else the default one found in ``root``."""
    if config_file:
        return load_config_file(config_file)
    return try_load_default(root or os.getcwd())
