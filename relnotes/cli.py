"""
Generate a changelog from conventional commits between two release tags.

Inputs are read from command-line flags, then GitHub Actions inputs
(INPUT_<NAME>), then the environment.
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from loguru import logger

from relnotes import config as _config
from relnotes._version import __version__
from relnotes.config import MODES, TARGETS, load_settings
from relnotes.errors import ConfigError
from relnotes.main import run
from relnotes.utils.actions import set_failed
from relnotes.utils.logger import config as configure_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="relnotes", description=__doc__)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--token", help="GitHub token (default: INPUT_TOKEN / GITHUB_TOKEN)")
    parser.add_argument(
        "--application-name", help="Application name used in the changelog header"
    )
    parser.add_argument("--tag-prefix", help="Prefix shared by this application's tags")
    parser.add_argument("--scope", help="Conventional commit scope to include")
    parser.add_argument(
        "--dependent-scopes",
        help="Comma-separated scopes whose entries are appended to the changelog",
    )
    parser.add_argument("--linear-api-key", help="Linear API key; enables issue updates")
    parser.add_argument("--deploy-url", help="Deploy URL printed below the compare URL")
    parser.add_argument(
        "--repository", help="Repository as owner/name (default: GITHUB_REPOSITORY)"
    )
    parser.add_argument("--ref", help="Workflow git ref (default: GITHUB_REF)")
    parser.add_argument("--mode", choices=MODES, help="How the commit range is resolved")
    parser.add_argument("--target", choices=TARGETS, help="Where the changelog is published")
    parser.add_argument("--output", help="Also write the changelog to this file")
    parser.add_argument("--date", help="Release date as YYYY-MM-DD (default: today)")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING); default: LOG_LEVEL or INFO",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        configure_logger(args.log_level)

    overrides = {
        "token": args.token,
        "application_name": args.application_name,
        "tag_prefix": args.tag_prefix,
        "scope": args.scope,
        "dependent_scopes": args.dependent_scopes,
        "linear_api_key": args.linear_api_key,
        "deploy_url": args.deploy_url,
        "repository": args.repository,
        "ref": args.ref,
        "mode": args.mode,
        "target": args.target,
        "output": args.output,
        "date": args.date,
    }
    try:
        settings = load_settings(overrides)
    except ConfigError as exc:
        logger.error(f"Invalid configuration: {exc}")
        if _config.IN_GITHUB_ACTIONS:
            set_failed(str(exc))
        return 1

    logger.debug(
        f"Settings: mode={settings.mode} target={settings.target} "
        f"repository={settings.repository or '-'} scope={settings.scope or '-'} "
        f"dependent_scopes={settings.dependent_scopes}"
    )
    return run(settings)
