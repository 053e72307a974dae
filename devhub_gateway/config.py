from __future__ import annotations

"""
Configuration loader for the DevHub gateway.

- Reads environment variables (optionally from `.env`) via pydantic-settings.
- Builds the explicit config objects handed to the core classes
  (:class:`~devhub_gateway.actions.ActionConfig`,
  :class:`~devhub_gateway.adapters.near_rpc.NearRpcConfig`).
- Loads the optional plugin dev manifest (``bitte.dev.json``).

Environment variables:
    HOST                  (str, default "0.0.0.0")
    PORT                  (int, default 8080)
    RPC_URL               (str, default "https://rpc.mainnet.near.org")
    RPC_TIMEOUT_S         (float, optional)    unset means no timeout
    CONTRACT_ID           (str, default "devhub.near")
    ACTION_GAS            (str, default "30000000000000")
    ACTION_DEPOSIT        (str, default "1")
    PLUGIN_MANIFEST_FILE  (str, default "bitte.dev.json")
    PLUGIN_SERVER_URL     (str, optional)
    PLUGIN_ACCOUNT_ID     (str, default "thomasguntenaar.near")
    LOG_LEVEL             (str, default "INFO")
    LOG_FORMAT            (str, default "json")
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import get_logger

log = get_logger(__name__)

DEFAULT_GAS = "30000000000000"
DEFAULT_DEPOSIT = "1"


# ----------------------------- Plugin dev manifest ---------------------------- #


class PluginDevManifest(BaseModel):
    """Subset of ``bitte.dev.json`` the gateway cares about."""

    url: Optional[str] = None


def load_plugin_dev_manifest(path: str | Path) -> PluginDevManifest:
    """
    Read the dev manifest, returning the default record when the file is
    absent or unreadable.
    """
    p = Path(path)
    if not p.is_file():
        return PluginDevManifest()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("plugin_manifest_unreadable", path=str(p), error=str(e))
        return PluginDevManifest()
    if not isinstance(data, dict):
        log.warning("plugin_manifest_not_object", path=str(p), type=type(data).__name__)
        return PluginDevManifest()
    url = data.get("url")
    return PluginDevManifest(url=url if isinstance(url, str) and url else None)


# --------------------------------- Settings ---------------------------------- #


class Settings(BaseSettings):
    # Server
    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(8080, ge=0, le=65535, description="Listen port")

    # Chain
    rpc_url: str = Field("https://rpc.mainnet.near.org", description="NEAR JSON-RPC endpoint")
    rpc_timeout_s: Optional[float] = Field(
        None, gt=0, description="Per-call timeout; unset waits indefinitely"
    )
    contract_id: str = Field("devhub.near", description="Contract every call targets")
    action_gas: str = Field(DEFAULT_GAS, description="Gas attached to function calls")
    action_deposit: str = Field(DEFAULT_DEPOSIT, description="Deposit attached to function calls (yoctoNEAR)")

    # Plugin manifest
    plugin_manifest_file: str = Field("bitte.dev.json", description="Optional dev manifest with a `url` key")
    plugin_server_url: Optional[str] = Field(None, description="Server url when the dev manifest has none")
    plugin_account_id: str = Field("thomasguntenaar.near", description="x-mb account-id")

    # Logging
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_format: str = Field("json", description="json or console")

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", case_sensitive=False, extra="ignore"
    )

    @field_validator("action_gas", "action_deposit")
    @classmethod
    def _decimal_string(cls, v: str) -> str:
        s = str(v).strip()
        if not s.isdigit():
            raise ValueError("must be a non-negative decimal integer string")
        return s

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, v: str) -> str:
        s = v.strip().lower()
        if s not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return s


class Config(Settings):
    """Settings plus builders for the config objects the core classes take."""

    def to_action_config(self):
        from .actions import ActionConfig

        return ActionConfig(gas=self.action_gas, deposit=self.action_deposit)

    def to_rpc_config(self):
        from .adapters.near_rpc import NearRpcConfig

        return NearRpcConfig(url=self.rpc_url, timeout_s=self.rpc_timeout_s)

    def server_url(self) -> str:
        """Public base url advertised in the plugin manifest."""
        dev = load_plugin_dev_manifest(self.plugin_manifest_file)
        return dev.url or self.plugin_server_url or f"http://localhost:{self.port}"


@lru_cache(maxsize=1)
def load_config() -> Config:
    """Return the cached process-wide config."""
    return Config()  # type: ignore[call-arg]


__all__ = [
    "Settings",
    "Config",
    "PluginDevManifest",
    "load_plugin_dev_manifest",
    "load_config",
    "DEFAULT_GAS",
    "DEFAULT_DEPOSIT",
]
