import json
import sys
from typing import Optional

import typer

from . import __version__
from .config import ReleaseConfig, load_release_file
from .doctor import diagnose_environment
from .release import ReleaseOptions, run_release
from .semver_math import RELEASE_TYPES

PROG = "git release"

app = typer.Typer(
    help="Bump the version in configured files, then commit, tag, test, push and publish.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def _usage() -> str:
    return f"Usage: {PROG} [options] [{'|'.join(RELEASE_TYPES)}]"


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"{PROG} v{__version__}")
        raise typer.Exit()


def _show_doctor(config_file: Optional[str]) -> None:
    cfg = load_release_file(config_file) or ReleaseConfig()
    res = diagnose_environment(cfg.git_command, cfg.npm_command)
    sys.stdout.write(json.dumps(res, ensure_ascii=False, indent=2) + "\n")
    ok = all(info.get("present") == "True" for info in res.values())
    raise typer.Exit(code=0 if ok else 1)


@app.command()
def release(
    release_type: Optional[str] = typer.Argument(
        None, metavar="RELEASE_TYPE", help="major|minor|patch|premajor|preminor|prepatch|prerelease"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Don't write files or run mutating commands"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every step"),
    no_test: bool = typer.Option(False, "--no-test", help="Skip running the package tests"),
    no_push: bool = typer.Option(False, "--no-push", help="Skip pushing commit and tag"),
    no_publish: bool = typer.Option(False, "--no-publish", help="Skip publishing the package"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Release file (.yml/.yaml/.json)"),
    from_file: bool = typer.Option(False, "--from-file", help="Parse .git/config instead of calling git config"),
    preid: Optional[str] = typer.Option(None, "--preid", help="Prerelease identifier, e.g. beta"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_show_version, is_eager=True, help="Print version information"
    ),
    doctor: bool = typer.Option(False, "--doctor", help="Check for the configured git and npm commands"),
) -> None:
    """Increment the version, commit, tag and optionally push and publish."""
    if doctor:
        _show_doctor(config_file)
    if not release_type:
        typer.echo(_usage())
        raise typer.Exit(code=1)
    options = ReleaseOptions(
        release_type=release_type,
        dry_run=dry_run,
        verbose=verbose,
        no_test=no_test,
        no_push=no_push,
        no_publish=no_publish,
        config_file=config_file,
        from_file=from_file,
        preid=preid,
    )
    try:
        ctx = run_release(options)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    if verbose:
        typer.echo("")
    suffix = " (dry-run)" if dry_run else ""
    typer.echo(f"Bumped to {ctx.version}, without errors{suffix}.")


if __name__ == "__main__":  # pragma: no cover
    app()

def main() -> None:  # console_scripts entrypoint
    app()
