"""icsprint.config_loader

Config loader for icsprint.

- Reads YAML with PyYAML (JSON files load too, JSON being a YAML subset).
- Applies ``ICSPRINT_*`` environment overrides.
- Exposes a typed dataclass ``Config`` and a ``load_config()`` helper that accepts
  an optional path override.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .models import AuthType, ICSAuth, ICSSource, RenderOptions

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("icsprint.yaml")

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class Config:
    """Typed configuration for icsprint.

    Fields:
        url: calendar subscription URL
        output: output file path (``-`` for stdout)
        pattern: optional regular expression filter
        invert: keep non-matching events
        case_sensitive: case-sensitive matching
        title: document title (feed calendar name, then "Calendar", when unset)
        include_summary / include_meta / include_desc / include_uid: content toggles
        timezone: IANA display zone (host local zone when unset)
        strict: fail on the first undecodable event
        request_timeout: HTTP timeout in seconds
        max_retries: retries for network failures
        retry_backoff_factor: exponential backoff base
        auth_type: "none", "basic" or "bearer"
        auth_username / auth_password: basic auth credentials
        bearer_token: bearer auth token
        headers: extra HTTP headers sent with the fetch
        log_level: logging level name
    """

    url: str | None = None
    output: str = "calendar.html"
    pattern: str | None = None
    invert: bool = False
    case_sensitive: bool = False
    title: str | None = None
    include_summary: bool = False
    include_meta: bool = False
    include_desc: bool = False
    include_uid: bool = False
    timezone: str | None = None
    strict: bool = False
    request_timeout: int = 30
    max_retries: int = 2
    retry_backoff_factor: float = 1.5
    log_level: str = "INFO"
    auth_type: str = AuthType.NONE.value
    auth_username: str | None = None
    auth_password: str | None = field(default=None, repr=False)
    bearer_token: str | None = field(default=None, repr=False)
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and coercion.

        Unknown keys are ignored with a warning. Values that cannot be coerced
        fall back to the field default, also with a warning.
        """
        if data is None:
            data = {}

        known = {f.name: f for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning("Ignoring unknown config key %r", key)

        defaults = cls()

        def _coerce_bool(key: str) -> bool:
            default = getattr(defaults, key)
            raw = data.get(key, default)
            if isinstance(raw, bool):
                return raw
            text = str(raw).strip().lower()
            if text in _TRUTHY:
                return True
            if text in _FALSY:
                return False
            logger.warning("Config %s=%r is not a boolean; using default %s", key, raw, default)
            return default

        def _coerce_number(key: str, kind: type) -> Any:
            default = getattr(defaults, key)
            raw = data.get(key, default)
            try:
                value = kind(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not a number; using default %s", key, raw, default)
                return default
            if value < 0:
                logger.warning("Config %s=%r is negative; using default %s", key, raw, default)
                return default
            return value

        def _optional_str(key: str) -> str | None:
            raw = data.get(key)
            return None if raw is None or raw == "" else str(raw)

        def _auth_type() -> str:
            raw = str(data.get("auth_type") or defaults.auth_type).strip().lower()
            if raw not in {t.value for t in AuthType}:
                logger.warning("Config auth_type=%r is not supported; using none", raw)
                return defaults.auth_type
            return raw

        def _headers() -> dict[str, str]:
            raw = data.get("headers") or {}
            if not isinstance(raw, dict):
                logger.warning("Config headers must be a mapping; ignoring %r", raw)
                return {}
            return {str(k): str(v) for k, v in raw.items()}

        return cls(
            url=_optional_str("url"),
            output=str(data.get("output") or defaults.output),
            pattern=_optional_str("pattern"),
            invert=_coerce_bool("invert"),
            case_sensitive=_coerce_bool("case_sensitive"),
            title=_optional_str("title"),
            include_summary=_coerce_bool("include_summary"),
            include_meta=_coerce_bool("include_meta"),
            include_desc=_coerce_bool("include_desc"),
            include_uid=_coerce_bool("include_uid"),
            timezone=_optional_str("timezone"),
            strict=_coerce_bool("strict"),
            request_timeout=_coerce_number("request_timeout", int),
            max_retries=_coerce_number("max_retries", int),
            retry_backoff_factor=_coerce_number("retry_backoff_factor", float),
            log_level=str(data.get("log_level") or defaults.log_level).upper(),
            auth_type=_auth_type(),
            auth_username=_optional_str("auth_username"),
            auth_password=_optional_str("auth_password"),
            bearer_token=_optional_str("bearer_token"),
            headers=_headers(),
        )

    def with_overrides(self, **overrides: Any) -> Config:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_options(self) -> RenderOptions:
        """Build the immutable render options for a run."""
        return RenderOptions(
            output=self.output,
            pattern=self.pattern,
            invert=self.invert,
            case_sensitive=self.case_sensitive,
            title=self.title,
            include_summary=self.include_summary,
            include_meta=self.include_meta,
            include_desc=self.include_desc,
            include_uid=self.include_uid,
        )

    def to_source(self) -> ICSSource:
        """Build the fetch source for the configured URL."""
        if not self.url:
            raise ValueError("No calendar URL configured")
        auth = ICSAuth(
            type=AuthType(self.auth_type),
            username=self.auth_username,
            password=self.auth_password,
            bearer_token=self.bearer_token,
        )
        if auth.type != AuthType.NONE and not auth.get_headers():
            logger.warning("Config auth_type=%s is missing its credentials", self.auth_type)
        return ICSSource(
            url=self.url,
            auth=auth,
            timeout=self.request_timeout,
            custom_headers=dict(self.headers),
        )


def _env_overrides() -> dict[str, Any]:
    """Collect ``ICSPRINT_*`` environment overrides."""
    overrides: dict[str, Any] = {}
    if os.environ.get("ICSPRINT_URL"):
        overrides["url"] = os.environ["ICSPRINT_URL"]
    if os.environ.get("ICSPRINT_TIMEZONE"):
        overrides["timezone"] = os.environ["ICSPRINT_TIMEZONE"]
    if os.environ.get("ICSPRINT_LOG_LEVEL"):
        overrides["log_level"] = os.environ["ICSPRINT_LOG_LEVEL"].upper()
    if os.environ.get("ICSPRINT_BEARER_TOKEN"):
        overrides["auth_type"] = AuthType.BEARER.value
        overrides["bearer_token"] = os.environ["ICSPRINT_BEARER_TOKEN"]
    if os.environ.get("ICSPRINT_DEBUG", "").strip().lower() in _TRUTHY:
        overrides["log_level"] = "DEBUG"
    return overrides


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to ./icsprint.yaml.

    Returns:
        Config with file values (or defaults) and environment overrides applied.

    Behavior:
    - If the file is missing: defaults are used (an explicit path must exist).
    - If the file exists but top-level is not a mapping: raises ValueError.
    """
    p = Path(path) if path else DEFAULT_CONFIG_PATH
    logger.debug("Attempting to load config from %s", p)

    if not p.exists():
        if path:
            raise FileNotFoundError(f"Config file {p} not found")
        logger.debug("Config file %s not found; using defaults", p)
        raw: Any = {}
    else:
        try:
            raw = yaml.safe_load(p.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"Unable to parse config file {p}: {exc}") from exc
        # safe_load returns None for empty files
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
            raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
        logger.info("Loaded configuration from %s", p)

    cfg = Config.from_dict(raw).with_overrides(**_env_overrides())
    logger.debug("Configuration values: %s", cfg)
    return cfg
