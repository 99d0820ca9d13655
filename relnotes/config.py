import os
from dataclasses import dataclass, field
from datetime import date
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from loguru import logger

from relnotes.errors import ConfigError
from relnotes.utils.logger import config as configure_logger

# Load .env as early as possible so all downstream imports see the intended env
load_dotenv()

# Configure logger after env is loaded (LOG_LEVEL honored)
configure_logger()


def _as_bool(val: str | None, default: bool) -> bool:
    if val is None:
        return default
    v = val.strip().lower()
    return v in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        logger.warning(f"Ignoring non-integer value '{val}', using {default}")
        return default


IN_GITHUB_ACTIONS = _as_bool(os.getenv("GITHUB_ACTIONS", None), False)
logger.debug(f"IN_GITHUB_ACTIONS={IN_GITHUB_ACTIONS}")

GITHUB_API_URL = (os.getenv("GITHUB_API_URL") or "https://api.github.com").rstrip("/")
GITHUB_SERVER_URL = (os.getenv("GITHUB_SERVER_URL") or "https://github.com").rstrip(
    "/"
)
LINEAR_API_URL = os.getenv("LINEAR_API_URL") or "https://api.linear.app/graphql"

# Timeout in seconds for each GitHub / Linear request.
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "20") or 20)

# Upper bound for parallel fan-out of independent API calls.
MAX_CONCURRENCY = max(1, _as_int(os.getenv("MAX_CONCURRENCY"), 8))

# GitHub list endpoints are paginated with this page size.
PAGE_SIZE = 100

MODE_RELEASE = "release"
MODE_TAGS = "tags"
MODE_LOCAL = "local"
MODES = (MODE_RELEASE, MODE_TAGS, MODE_LOCAL)

TARGET_UPDATE_RELEASE = "update-release"
TARGET_CREATE_RELEASE = "create-release"
TARGET_PRINT = "print"
TARGETS = (TARGET_UPDATE_RELEASE, TARGET_CREATE_RELEASE, TARGET_PRINT)

DEFAULT_TARGETS = {
    MODE_RELEASE: TARGET_UPDATE_RELEASE,
    MODE_TAGS: TARGET_CREATE_RELEASE,
    MODE_LOCAL: TARGET_PRINT,
}


def get_input(
    name: str, env: Optional[Mapping[str, str]] = None, fallback: Optional[str] = None
) -> str:
    """Read a GitHub Actions input (``INPUT_<NAME>``), then the plain fallback variable.

    Mirrors how the Actions runner exposes ``with:`` inputs: upper-cased, spaces
    replaced by underscores. Values are stripped; a missing input is ``""``.
    """
    source = os.environ if env is None else env
    key = "INPUT_" + name.replace(" ", "_").upper()
    value = source.get(key)
    if value is None or not value.strip():
        value = source.get(fallback) if fallback else None
    return (value or "").strip()


def parse_scopes(raw: str | None) -> List[str]:
    """Split a comma-separated scope list, dropping blanks.

    Example: " api , , web " -> ["api", "web"]
    """
    if not raw:
        return []
    return [s.strip() for s in raw.strip().split(",") if s.strip()]


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for a single changelog run."""

    application_name: str
    token: str = ""
    repository: str = ""
    ref: str = ""
    tag_prefix: str = ""
    scope: str = ""
    dependent_scopes: List[str] = field(default_factory=list)
    linear_api_key: str = ""
    deploy_url: str = ""
    mode: str = MODE_RELEASE
    target: str = TARGET_UPDATE_RELEASE
    output: str = ""
    release_date: Optional[date] = None
    api_url: str = GITHUB_API_URL
    server_url: str = GITHUB_SERVER_URL
    linear_api_url: str = LINEAR_API_URL
    max_concurrency: int = MAX_CONCURRENCY

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]

    @property
    def needs_github(self) -> bool:
        return (
            self.mode in (MODE_RELEASE, MODE_TAGS)
            or self.target in (TARGET_UPDATE_RELEASE, TARGET_CREATE_RELEASE)
            or bool(self.linear_api_key)
        )

    def validate(self) -> "Settings":
        """Raise ConfigError when the combination of inputs cannot run."""
        if not self.application_name:
            raise ConfigError("application_name is required")
        if self.mode not in MODES:
            raise ConfigError(
                f"Unknown mode '{self.mode}' (expected one of: {', '.join(MODES)})"
            )
        if self.target not in TARGETS:
            raise ConfigError(
                f"Unknown target '{self.target}' (expected one of: {', '.join(TARGETS)})"
            )
        if self.target == TARGET_UPDATE_RELEASE and self.mode != MODE_RELEASE:
            raise ConfigError(
                f"Target '{TARGET_UPDATE_RELEASE}' requires mode '{MODE_RELEASE}'"
            )
        if self.needs_github:
            if not self.token:
                raise ConfigError("A GitHub token is required for this mode/target")
            parts = self.repository.split("/")
            if len(parts) != 2 or not all(p.strip() for p in parts):
                raise ConfigError(
                    f"Repository must be in 'owner/name' form, got '{self.repository}'"
                )
        if self.mode == MODE_RELEASE and not self.ref:
            raise ConfigError("A git ref (GITHUB_REF) is required in release mode")
        return self


def _parse_date(raw: str | None) -> Optional[date]:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid date '{raw}', expected YYYY-MM-DD") from exc


def load_settings(
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from CLI overrides, Actions inputs and environment, in that order.

    Parameters:
        overrides (Mapping[str, Optional[str]] | None): Values given on the command
            line, keyed by setting name. ``None`` or empty values fall through.
        env (Mapping[str, str] | None): Environment to read; defaults to ``os.environ``.

    Returns:
        Settings: validated settings.

    Raises:
        ConfigError: when required inputs are missing or inconsistent.
    """
    source = os.environ if env is None else env
    cli = {k: v for k, v in (overrides or {}).items() if v not in (None, "")}

    def pick(name: str, fallback: Optional[str] = None) -> str:
        if name in cli:
            return str(cli[name]).strip()
        return get_input(name, source, fallback)

    mode = (pick("mode") or MODE_RELEASE).lower()
    target = (pick("target") or DEFAULT_TARGETS.get(mode, TARGET_PRINT)).lower()
    concurrency_raw = (source.get("MAX_CONCURRENCY") or "").strip()
    try:
        max_concurrency = (
            max(1, int(concurrency_raw)) if concurrency_raw else MAX_CONCURRENCY
        )
    except ValueError as exc:
        raise ConfigError(
            f"MAX_CONCURRENCY must be an integer, got '{concurrency_raw}'"
        ) from exc

    settings = Settings(
        application_name=pick("application_name"),
        token=pick("token", "GITHUB_TOKEN"),
        repository=pick("repository", "GITHUB_REPOSITORY"),
        ref=str(cli.get("ref") or source.get("GITHUB_REF", "")).strip(),
        tag_prefix=pick("tag_prefix"),
        scope=pick("scope"),
        dependent_scopes=parse_scopes(pick("dependent_scopes")),
        linear_api_key=pick("linear_api_key", "LINEAR_API_KEY"),
        deploy_url=pick("deploy_url"),
        mode=mode,
        target=target,
        output=pick("output"),
        release_date=_parse_date(cli.get("date")),
        api_url=(source.get("GITHUB_API_URL") or GITHUB_API_URL).rstrip("/"),
        server_url=(source.get("GITHUB_SERVER_URL") or GITHUB_SERVER_URL).rstrip("/"),
        linear_api_url=source.get("LINEAR_API_URL") or LINEAR_API_URL,
        max_concurrency=max_concurrency,
    )
    return settings.validate()
