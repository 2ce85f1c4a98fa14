"""例外類別 — transport、schema、emitter 與設定錯誤."""

from typing import Iterable, Optional


class FigmaTokensError(Exception):
    """figma_tokens 所有例外的基底類別."""


class FetchError(FigmaTokensError):
    """Figma API 請求失敗（網路、HTTP 狀態碼、JSON 或 schema 不符）."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SchemaValidationError(FigmaTokensError):
    """API 回應與預期結構不符；path 為出錯欄位（如 document.children.0.name）."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class UnsupportedFormatError(FigmaTokensError):
    def __init__(self, fmt: str):
        super().__init__(f"Unsupported format: {fmt}")
        self.format = fmt


class ConfigurationError(FigmaTokensError):
    """必要設定（如 access token）缺漏."""


class TokenNameCollisionError(FigmaTokensError):
    """strict 模式下同一群組內出現重複 token 名稱."""

    def __init__(self, group: str, names: Iterable[str]):
        self.group = group
        self.names = sorted(names)
        super().__init__(
            f"Duplicate token names in group '{group}': {', '.join(self.names)}"
        )
