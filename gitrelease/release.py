from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import typer

from .config import ReleaseConfig, load_config_file, merge_settings, read_git_settings, try_load_default
from .errors import ConfigError, InvalidArgumentError, VersionNotFoundError
from .git import Git
from .npm import PackageManager, is_private, read_package
from .patcher import Patcher, ReleaseContext, parse_target
from .semver_math import is_release_type

DRY_RUN = "done (dry-run)"


@dataclass
class ReleaseOptions:
    release_type: str
    dry_run: bool = False
    verbose: bool = False
    no_test: bool = False
    no_push: bool = False
    no_publish: bool = False
    config_file: Optional[str] = None
    from_file: bool = False
    preid: Optional[str] = None


class Reporter:
    """Step trace, printed only in verbose mode."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def step(self, message: str) -> None:
        if self.verbose:
            typer.echo(f"{message}: ", nl=False)

    def done(self, outcome: str = "done") -> None:
        if self.verbose:
            typer.echo(outcome)

    def aborted(self) -> None:
        if self.verbose:
            typer.echo("aborted")


class _Package:
    """Lazily resolved package.json next to the package manager's prefix."""

    def __init__(self, npm: PackageManager) -> None:
        self.npm = npm
        self._loaded = False
        self._data: Optional[Dict[str, Any]] = None

    def get(self) -> Optional[Dict[str, Any]]:
        if not self._loaded:
            self._data = read_package(self.npm.prefix())
            self._loaded = True
        return self._data


def run_release(
    options: ReleaseOptions,
    git: Optional[Git] = None,
    npm: Optional[PackageManager] = None,
    reporter: Optional[Reporter] = None,
) -> ReleaseContext:
    """Bump, commit, tag, push and publish; returns the finished context.

    Any failure propagates at once. Files already written or staged are
    left as they are.
    """
    reporter = reporter or Reporter(options.verbose)
    try:
        return _run(options, git, npm, reporter)
    except Exception:
        reporter.aborted()
        raise


def _run(
    options: ReleaseOptions,
    git: Optional[Git],
    npm: Optional[PackageManager],
    reporter: Reporter,
) -> ReleaseContext:
    reporter.step("Inspecting increment part")
    if not is_release_type(options.release_type):
        raise InvalidArgumentError(
            f'{options.release_type} is not "(pre)major", "(pre)minor", "(pre)patch", or "prerelease".'
        )
    reporter.done(options.release_type)

    file_cfg: Optional[ReleaseConfig] = None
    if options.config_file:
        file_cfg = load_config_file(options.config_file)
    injected = git is not None
    git_command = file_cfg.git_command if file_cfg else "git"
    locator = git or Git(git_command)

    reporter.step("Finding Git root")
    root = locator.show_toplevel()
    reporter.done(root)
    if file_cfg is None:
        file_cfg = try_load_default(root)
        if file_cfg:
            git_command = file_cfg.git_command
    if not injected and git_command != locator.command:
        git = Git(git_command)
    else:
        git = locator

    reporter.step("Getting target configuration")
    cfg = merge_settings(read_git_settings(git, from_file=options.from_file), file_cfg)
    if not cfg.targets:
        raise ConfigError("No release.target configured.")
    ctx = ReleaseContext(
        release_type=options.release_type,
        dry_run=options.dry_run,
        root=root,
        preid=options.preid or cfg.preid,
        targets=[parse_target(entry, root) for entry in cfg.targets],
    )
    reporter.done()

    reporter.step("Getting push configuration")
    ctx.push = bool(cfg.push) and not options.no_push
    reporter.done(str(ctx.push).lower())
    reporter.step("Getting publish configuration")
    ctx.publish = bool(cfg.publish) and not options.no_publish
    reporter.done(str(ctx.publish).lower())
    ctx.test = cfg.test is not False and not options.no_test

    if npm is None:
        npm = PackageManager(cfg.npm_command)
    package = _Package(npm)

    patcher, files = _increment(ctx, reporter)
    for path in files:
        _write_and_stage(ctx, patcher, git, path, reporter)

    tag_name = f"{cfg.tag_prefix}{ctx.version}"
    _commit(ctx, git, cfg.commit_message.format(version=ctx.version), reporter)
    _tag(ctx, git, tag_name, reporter)
    _test(ctx, npm, package, reporter)
    _push(ctx, git, cfg.remote, tag_name, reporter)
    _publish(ctx, npm, package, reporter)
    return ctx


def _test(ctx: ReleaseContext, npm: PackageManager, package: _Package, reporter: Reporter) -> None:
    reporter.step("Running tests")
    if not ctx.test:
        reporter.done("skip")
        return
    if package.get() is None:
        reporter.done("skip (no package.json)")
        return
    npm.test()
    reporter.done()


def _increment(ctx: ReleaseContext, reporter: Reporter) -> Tuple[Patcher, List[str]]:
    """Patch every target in memory before any file is written."""
    patcher = Patcher(ctx)
    files: List[str] = []
    for target in ctx.targets:
        reporter.step(f'Incrementing version in line {target.line} of "{target.file}"')
        patch = patcher.apply(target)
        reporter.done(ctx.version if patch.matched else "no version found")
        if target.file not in files:
            files.append(target.file)
    if ctx.version is None:
        raise VersionNotFoundError("No version found on any target line.")
    return patcher, files


def _write_and_stage(ctx: ReleaseContext, patcher: Patcher, git: Git, path: str, reporter: Reporter) -> None:
    reporter.step(f'Writing "{path}"')
    reporter.done("done" if patcher.write(path) else DRY_RUN)
    reporter.step(f'Staging "{path}"')
    if ctx.dry_run:
        reporter.done(DRY_RUN)
        return
    git.add(path)
    reporter.done()


def _commit(ctx: ReleaseContext, git: Git, message: str, reporter: Reporter) -> None:
    reporter.step("Committing changes")
    if ctx.dry_run:
        reporter.done(DRY_RUN)
        return
    git.commit(message)
    reporter.done()


def _tag(ctx: ReleaseContext, git: Git, name: str, reporter: Reporter) -> None:
    reporter.step(f"Tagging commit {name}")
    if ctx.dry_run:
        reporter.done(DRY_RUN)
        return
    git.tag(name)
    reporter.done()


def _push(ctx: ReleaseContext, git: Git, remote: str, tag_name: str, reporter: Reporter) -> None:
    reporter.step("Pushing commit & tag")
    if not ctx.push:
        reporter.done("skip")
        return
    if remote not in git.remotes():
        reporter.done(f"skip (no remote {remote})")
        return
    if ctx.dry_run:
        reporter.done(DRY_RUN)
        return
    git.push(remote, "HEAD", tag_name)
    reporter.done()


def _publish(ctx: ReleaseContext, npm: PackageManager, package: _Package, reporter: Reporter) -> None:
    reporter.step("Publishing package")
    if not ctx.publish:
        reporter.done("skip")
        return
    data = package.get()
    if data is None:
        reporter.done("skip (no package.json)")
        return
    if is_private(data):
        reporter.done("skip (private)")
        return
    if ctx.dry_run:
        reporter.done(DRY_RUN)
        return
    npm.publish()
    reporter.done()
