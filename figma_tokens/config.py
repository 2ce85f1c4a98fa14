"""設定檔載入與基本驗證（figma-tokens.config.json + 環境變數）."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_CONFIG_PATH = "figma-tokens.config.json"

DEFAULT_SYNC_INTERVAL_MS = 300000
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"figma", "sync"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "figma": {"accessToken", "teamId", "projectId", "fileKey"},
    "sync": {"format", "outputPath", "interval", "maxRetries", "retryDelay", "webhookUrl"},
}

_VALID_FORMATS = {"json", "css", "scss", "ts"}


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


@dataclass
class SyncConfig:
    """Figma 連線與同步設定.

    max_retries / retry_delay_ms / webhook_url 保留於設定中供外部工具讀取，
    FigmaAPIClient 目前不重試。
    """
    access_token: str = ""
    team_id: Optional[str] = None
    project_id: Optional[str] = None
    design_system_file_key: Optional[str] = None
    webhook_url: Optional[str] = None
    sync_interval_ms: int = DEFAULT_SYNC_INTERVAL_MS
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            _warn(f"'{section}' 應為 JSON 物件，目前是 {type(section_cfg).__name__}")
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    sync_cfg = cfg.get("sync", {})
    if not isinstance(sync_cfg, dict):
        return

    fmt = sync_cfg.get("format")
    if fmt and fmt not in _VALID_FORMATS:
        valid = ", ".join(sorted(_VALID_FORMATS))
        _warn(f"sync.format '{fmt}' 不在已知值中（{valid}）")

    for key in ("interval", "maxRetries", "retryDelay"):
        val = sync_cfg.get(key)
        if val is not None and (not isinstance(val, int) or isinstance(val, bool)):
            _warn(f"sync.{key} 應為整數，目前是 {type(val).__name__}")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        print(f"   ⚠️  [config] '{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg


def load_env(dotenv_path: Optional[str] = None) -> None:
    """載入 .env（不覆寫既有環境變數）."""
    load_dotenv(dotenv_path or os.path.join(os.getcwd(), ".env"), override=False)


def _int_setting(value: Any, name: str, default: int) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        _warn(f"{name} 應為整數，改用預設值 {default}")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        _warn(f"{name} '{value}' 不是整數，改用預設值 {default}")
        return default


def _section(cfg: Mapping, name: str) -> Mapping:
    section = cfg.get(name, {}) if cfg else {}
    return section if isinstance(section, dict) else {}


def load_sync_config(cfg: Optional[dict] = None, env: Optional[Mapping[str, str]] = None) -> SyncConfig:
    """合併設定檔與環境變數：設定檔優先，其次環境變數，最後預設值."""
    env = os.environ if env is None else env
    figma_cfg = _section(cfg or {}, "figma")
    sync_cfg = _section(cfg or {}, "sync")

    def int_from(key: str, env_name: str, default: int) -> int:
        # 警告訊息標出值實際來源（設定檔欄位或環境變數）
        if key in sync_cfg:
            return _int_setting(sync_cfg[key], f"sync.{key}", default)
        return _int_setting(env.get(env_name), env_name, default)

    return SyncConfig(
        access_token=figma_cfg.get("accessToken") or env.get("FIGMA_ACCESS_TOKEN", ""),
        team_id=figma_cfg.get("teamId") or env.get("FIGMA_TEAM_ID"),
        project_id=figma_cfg.get("projectId") or env.get("FIGMA_PROJECT_ID"),
        design_system_file_key=figma_cfg.get("fileKey") or env.get("FIGMA_DESIGN_SYSTEM_FILE_KEY"),
        webhook_url=sync_cfg.get("webhookUrl") or env.get("FIGMA_WEBHOOK_URL"),
        sync_interval_ms=int_from("interval", "FIGMA_SYNC_INTERVAL", DEFAULT_SYNC_INTERVAL_MS),
        max_retries=int_from("maxRetries", "FIGMA_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        retry_delay_ms=int_from("retryDelay", "FIGMA_RETRY_DELAY", DEFAULT_RETRY_DELAY_MS),
    )


def require_token(sync_config: SyncConfig) -> str:
    if not sync_config.access_token:
        raise ConfigurationError(
            "FIGMA_ACCESS_TOKEN environment variable is required "
            "(or set figma.accessToken in the config file)"
        )
    return sync_config.access_token
