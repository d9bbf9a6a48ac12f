"""Client configuration, read from the environment with builder-style overrides."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, replace
from typing import TypeVar

from dotenv import load_dotenv

from .constants import (
    DEFAULT_CONNECTION_TIMEOUT_SECS,
    DEFAULT_HEARTBEAT_INTERVAL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROD_HOST,
    DEFAULT_PROD_PORT,
    DEFAULT_RECONNECT_ATTEMPTS,
    DEFAULT_RECONNECT_DELAY_SECS,
    DEFAULT_SENDER_COMP_ID,
    DEFAULT_SSL_PORT,
    DEFAULT_TARGET_COMP_ID,
    DEFAULT_TEST_HOST,
    DEFAULT_TEST_PORT,
)
from .errors import ConfigError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF

# Environment variables holding the login and the registered-application credentials.
_LOGIN_ENV = ("DERIBIT_USERNAME", "DERIBIT_PASSWORD")
_APP_ENV = ("DERIBIT_APP_ID", "DERIBIT_APP_SECRET")


def _parse(raw: str, default: T, maximum: int | None = None) -> T:
    if isinstance(default, bool):
        if raw == "true":
            return True  # type: ignore[return-value]
        if raw == "false":
            return False  # type: ignore[return-value]
        raise ValueError(raw)
    if isinstance(default, int):
        if not _UNSIGNED.fullmatch(raw):
            raise ValueError(raw)
        value = int(raw)
        if maximum is not None and value > maximum:
            raise ValueError(raw)
        return value  # type: ignore[return-value]
    if isinstance(default, float):
        return float(raw)  # type: ignore[return-value]
    return raw  # type: ignore[return-value]


def _lookup(name: str, default: T, maximum: int | None = None) -> T:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return _parse(raw, default, maximum)
    except ValueError:
        logger.error("Failed to parse %s: %s, using default", name, raw)
        return default


def get_env_or_default(name: str, default: T) -> T:
    """Return the variable parsed as the type of ``default``, or ``default``."""
    return _lookup(name, default)


def get_env_optional(name: str) -> str | None:
    """Return the variable's value, or None when it is not set."""
    return os.environ.get(name)


def _login_from_env() -> tuple[str, str]:
    user_var, credential_var = _LOGIN_ENV
    return get_env_or_default(user_var, ""), get_env_or_default(credential_var, "")


def _app_from_env() -> tuple[str | None, str | None]:
    id_var, credential_var = _APP_ENV
    return get_env_optional(id_var), get_env_optional(credential_var)


def _default_endpoint(test_mode: bool, use_ssl: bool) -> tuple[str, int]:
    host = DEFAULT_TEST_HOST if test_mode else DEFAULT_PROD_HOST
    if use_ssl:
        return host, DEFAULT_SSL_PORT
    return host, DEFAULT_TEST_PORT if test_mode else DEFAULT_PROD_PORT


@dataclass
class DeribitFixConfig:
    """Settings for a FIX session. Durations are in seconds."""

    username: str = ""
    password: str = field(default="", repr=False)
    host: str = DEFAULT_TEST_HOST
    port: int = DEFAULT_TEST_PORT
    use_ssl: bool = False
    test_mode: bool = True
    heartbeat_interval: int = DEFAULT_HEARTBEAT_INTERVAL
    connection_timeout: float = float(DEFAULT_CONNECTION_TIMEOUT_SECS)
    reconnect_attempts: int = DEFAULT_RECONNECT_ATTEMPTS
    reconnect_delay: float = float(DEFAULT_RECONNECT_DELAY_SECS)
    enable_logging: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    sender_comp_id: str = DEFAULT_SENDER_COMP_ID
    target_comp_id: str = DEFAULT_TARGET_COMP_ID
    cancel_on_disconnect: bool = False
    app_id: str | None = None
    app_secret: str | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> DeribitFixConfig:
        """Build a configuration from DERIBIT_* variables, loading a .env file first."""
        if load_dotenv():
            logger.debug("Successfully loaded .env file")
        else:
            logger.debug("No .env file loaded")

        test_mode = get_env_or_default("DERIBIT_TEST_MODE", True)
        use_ssl = get_env_or_default("DERIBIT_USE_SSL", False)
        default_host, default_port = _default_endpoint(test_mode, use_ssl)
        username, password = _login_from_env()
        app_id, app_secret = _app_from_env()

        return cls(
            username=username,
            password=password,
            host=get_env_or_default("DERIBIT_HOST", default_host),
            port=_lookup("DERIBIT_PORT", default_port, _U16_MAX),
            use_ssl=use_ssl,
            test_mode=test_mode,
            heartbeat_interval=_lookup(
                "DERIBIT_HEARTBEAT_INTERVAL", DEFAULT_HEARTBEAT_INTERVAL, _U32_MAX
            ),
            connection_timeout=float(
                get_env_or_default("DERIBIT_CONNECTION_TIMEOUT", DEFAULT_CONNECTION_TIMEOUT_SECS)
            ),
            reconnect_attempts=_lookup(
                "DERIBIT_RECONNECT_ATTEMPTS", DEFAULT_RECONNECT_ATTEMPTS, _U32_MAX
            ),
            reconnect_delay=float(
                get_env_or_default("DERIBIT_RECONNECT_DELAY", DEFAULT_RECONNECT_DELAY_SECS)
            ),
            enable_logging=get_env_or_default("DERIBIT_ENABLE_LOGGING", True),
            log_level=get_env_or_default("DERIBIT_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            sender_comp_id=get_env_or_default("DERIBIT_SENDER_COMP_ID", DEFAULT_SENDER_COMP_ID),
            target_comp_id=get_env_or_default("DERIBIT_TARGET_COMP_ID", DEFAULT_TARGET_COMP_ID),
            cancel_on_disconnect=get_env_or_default("DERIBIT_CANCEL_ON_DISCONNECT", False),
            app_id=app_id,
            app_secret=app_secret,
        )

    @classmethod
    def production(cls) -> DeribitFixConfig:
        """Configuration for the production environment."""
        config = cls.from_env()
        default_port = DEFAULT_SSL_PORT if config.use_ssl else DEFAULT_PROD_PORT
        return replace(
            config,
            test_mode=False,
            host=get_env_or_default("DERIBIT_HOST", DEFAULT_PROD_HOST),
            port=_lookup("DERIBIT_PORT", default_port, _U16_MAX),
        )

    @classmethod
    def production_with_credentials(cls, username: str, password: str) -> DeribitFixConfig:
        """Production configuration with the given credentials."""
        return cls.production().with_credentials(username, password)

    @classmethod
    def production_ssl(cls) -> DeribitFixConfig:
        """Production configuration over SSL."""
        return replace(
            cls.production(),
            use_ssl=True,
            port=_lookup("DERIBIT_PORT", DEFAULT_SSL_PORT, _U16_MAX),
        )

    @classmethod
    def test_ssl(cls) -> DeribitFixConfig:
        """Test-environment configuration over SSL."""
        return replace(
            cls.from_env(),
            use_ssl=True,
            port=_lookup("DERIBIT_PORT", DEFAULT_SSL_PORT, _U16_MAX),
        )

    def with_credentials(self, username: str, password: str) -> DeribitFixConfig:
        return replace(self, username=username, password=password)

    def with_endpoint(self, host: str, port: int) -> DeribitFixConfig:
        return replace(self, host=host, port=port)

    def with_ssl(self, use_ssl: bool) -> DeribitFixConfig:
        return replace(self, use_ssl=use_ssl)

    def with_heartbeat_interval(self, interval: int) -> DeribitFixConfig:
        return replace(self, heartbeat_interval=interval)

    def with_connection_timeout(self, timeout: float) -> DeribitFixConfig:
        return replace(self, connection_timeout=timeout)

    def with_reconnection(self, attempts: int, delay: float) -> DeribitFixConfig:
        return replace(self, reconnect_attempts=attempts, reconnect_delay=delay)

    def with_logging(self, enabled: bool, level: str) -> DeribitFixConfig:
        return replace(self, enable_logging=enabled, log_level=level)

    def with_session_ids(self, sender_comp_id: str, target_comp_id: str) -> DeribitFixConfig:
        return replace(self, sender_comp_id=sender_comp_id, target_comp_id=target_comp_id)

    def with_cancel_on_disconnect(self, cancel_on_disconnect: bool) -> DeribitFixConfig:
        return replace(self, cancel_on_disconnect=cancel_on_disconnect)

    def with_app_credentials(self, app_id: str, app_secret: str) -> DeribitFixConfig:
        return replace(self, app_id=app_id, app_secret=app_secret)

    def connection_url(self) -> str:
        """Return ``host:port``."""
        return f"{self.host}:{self.port}"

    def validate(self) -> None:
        """Raise ConfigError if the configuration cannot be used."""
        if not self.username:
            raise ConfigError("Username cannot be empty")
        if not self.password:
            raise ConfigError("Password cannot be empty")
        if not self.host:
            raise ConfigError("Host cannot be empty")
        if self.port == 0:
            raise ConfigError("Port must be greater than 0")
        if self.heartbeat_interval == 0:
            raise ConfigError("Heartbeat interval must be greater than 0")
        if not self.sender_comp_id:
            raise ConfigError("Sender company ID cannot be empty")
        if not self.target_comp_id:
            raise ConfigError("Target company ID cannot be empty")
        if self.app_id is not None and self.app_secret is None:
            raise ConfigError("Application secret is required when app ID is provided")
        if self.app_secret is not None and self.app_id is None:
            raise ConfigError("Application ID is required when app secret is provided")