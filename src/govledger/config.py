# src/govledger/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Hashable


def _as_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except Exception:
        return int(default)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v).strip()
    return s if s else str(default)


def _as_bool(v: Any, default: bool) -> bool:
    if v is None:
        return bool(default)
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return bool(default)


@dataclass(frozen=True)
class GovConfig:
    mode: str  # "dev" | "testnet" | "prod"

    api_host: str
    api_port: int

    log_level: str

    # How the HTTP layer turns the caller's "account" field into an AccountId.
    account_id_kind: str  # "str" | "int"

    metrics_enabled: bool

    def parse_account(self, raw: Any) -> Hashable:
        if self.account_id_kind == "int":
            if isinstance(raw, bool):
                raise ValueError("account id must be an integer")
            return int(raw)
        s = str(raw).strip()
        if not s:
            raise ValueError("account id must be a non-empty string")
        return s


_ALLOWED_MODES = {"dev", "testnet", "prod"}
_ALLOWED_ACCOUNT_KINDS = {"str", "int"}
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_gov_config(cfg: GovConfig) -> None:
    """Fail-fast validation for operator config."""

    if cfg.mode not in _ALLOWED_MODES:
        raise ValueError(f"mode must be one of {sorted(_ALLOWED_MODES)}; got: {cfg.mode!r}")

    if not cfg.api_host:
        raise ValueError("api_host must be a non-empty string")

    if not (0 < int(cfg.api_port) < 65536):
        raise ValueError(f"api_port out of range: {cfg.api_port}")

    if cfg.log_level not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"log_level must be one of {sorted(_ALLOWED_LOG_LEVELS)}; got: {cfg.log_level!r}")

    if cfg.account_id_kind not in _ALLOWED_ACCOUNT_KINDS:
        raise ValueError(
            f"account_id_kind must be one of {sorted(_ALLOWED_ACCOUNT_KINDS)}; got: {cfg.account_id_kind!r}"
        )


def load_gov_config() -> GovConfig:
    cfg = GovConfig(
        mode=_as_str(os.getenv("GOVLEDGER_MODE"), "prod").lower(),
        api_host=_as_str(os.getenv("GOVLEDGER_API_HOST"), "127.0.0.1"),
        api_port=_as_int(os.getenv("GOVLEDGER_API_PORT"), 8080),
        log_level=_as_str(os.getenv("GOVLEDGER_LOG_LEVEL"), "INFO").upper(),
        account_id_kind=_as_str(os.getenv("GOVLEDGER_ACCOUNT_ID_KIND"), "str").lower(),
        metrics_enabled=_as_bool(os.getenv("GOVLEDGER_METRICS_ENABLED"), False),
    )
    validate_gov_config(cfg)
    return cfg
