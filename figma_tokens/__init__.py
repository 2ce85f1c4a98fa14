"""
figma-tokens — Figma design token 同步（Python 管線）

讀取 Figma 檔案、擷取 color / spacing / typography / component token，
並輸出為 JSON、CSS、SCSS 或 TypeScript。
"""

__version__ = "0.1.0"

from .errors import (
    FigmaTokensError,
    FetchError,
    SchemaValidationError,
    UnsupportedFormatError,
    ConfigurationError,
    TokenNameCollisionError,
)
from .config import SyncConfig, load_config, load_sync_config, validate_config
from .schema import DesignFile, Node, ProjectSummary, parse_file, parse_project
from .figma_reader import FigmaAPIClient
from .tokens import DesignToken, DesignTokenGroup
from .extractors import (
    extract_color_tokens,
    extract_spacing_tokens,
    extract_typography_tokens,
    extract_component_tokens,
    rgba_to_hex,
)
from .service import TokenService, ValidationResult, tokens_from_file
from .generator import FORMATS, render, to_typed_namespace, write_output

__all__ = [
    "__version__",
    "FigmaTokensError",
    "FetchError",
    "SchemaValidationError",
    "UnsupportedFormatError",
    "ConfigurationError",
    "TokenNameCollisionError",
    "SyncConfig",
    "load_config",
    "load_sync_config",
    "validate_config",
    "DesignFile",
    "Node",
    "ProjectSummary",
    "parse_file",
    "parse_project",
    "FigmaAPIClient",
    "DesignToken",
    "DesignTokenGroup",
    "extract_color_tokens",
    "extract_spacing_tokens",
    "extract_typography_tokens",
    "extract_component_tokens",
    "rgba_to_hex",
    "TokenService",
    "ValidationResult",
    "tokens_from_file",
    "FORMATS",
    "render",
    "to_typed_namespace",
    "write_output",
]
