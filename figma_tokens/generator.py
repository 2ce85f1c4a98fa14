"""
Generator — design token groups → JSON / CSS / SCSS / TypeScript.

render() is pure; write_output() creates the parent directory and writes once.
to_typed_namespace() emits the richer `generate-types` TypeScript namespace.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .errors import UnsupportedFormatError
from .tokens import DesignTokenGroup

FORMATS = ("json", "css", "scss", "ts")

FORMAT_EXTENSIONS: Dict[str, str] = {
    "json": ".json",
    "css": ".css",
    "scss": ".scss",
    "ts": ".ts",
}

_VAR_INVALID = re.compile(r"[^a-z0-9-]")
_PROP_INVALID = re.compile(r"[^a-zA-Z0-9]")


def variable_name(group_name: str, token_name: str) -> str:
    """`{group}-{token}` lower-cased, every char outside [a-z0-9-] → '-'."""
    return _VAR_INVALID.sub("-", f"{group_name}-{token_name}".lower())


def property_name(token_name: str) -> str:
    return _PROP_INVALID.sub("", token_name)


def _json_compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _css_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json_compact(value)
    return str(value)


def to_json(groups: List[DesignTokenGroup]) -> str:
    return json.dumps([g.to_dict() for g in groups], indent=2, ensure_ascii=False)


def to_css(groups: List[DesignTokenGroup]) -> str:
    lines = [":root {"]
    for group in groups:
        lines.append(f"  /* {group.name} */")
        for token in group.tokens:
            lines.append(f"  --{variable_name(group.name, token.name)}: {_css_value(token.value)};")
        lines.append("")
    lines.append("}")
    return "\n".join(lines)


def to_scss(groups: List[DesignTokenGroup]) -> str:
    lines = []
    for group in groups:
        lines.append(f"// {group.name}")
        for token in group.tokens:
            lines.append(f"${variable_name(group.name, token.name)}: {_css_value(token.value)};")
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def to_typescript(groups: List[DesignTokenGroup]) -> str:
    lines = ["export const designTokens = {"]
    for group in groups:
        lines.append(f"  {group.name}: {{")
        for token in group.tokens:
            lines.append(f"    {property_name(token.name)}: {_json_compact(token.value)},")
        lines.append("  },")
    lines.append("} as const;")
    lines.append("")
    lines.append("export type DesignTokens = typeof designTokens;")
    return "\n".join(lines)


_RENDERERS: Dict[str, Callable[[List[DesignTokenGroup]], str]] = {
    "json": to_json,
    "css": to_css,
    "scss": to_scss,
    "ts": to_typescript,
}


def render(groups: List[DesignTokenGroup], fmt: str = "json") -> str:
    renderer = _RENDERERS.get(fmt)
    if renderer is None:
        raise UnsupportedFormatError(fmt)
    return renderer(groups)


def write_output(content: str, output_path: str) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ─── TypeScript namespace（generate-types）───

_TYPE_NAME_INVALID = re.compile(r"[^a-zA-Z0-9\s]")

# token type → TS 型別；值為 (一般, strict)
_TS_TYPES: Dict[str, tuple] = {
    "color": ("string", "string"),
    "spacing": ("number", "number"),
    "typography": ("string", "string"),
    "borderRadius": ("number", "number"),
    "shadow": ("string", "string"),
    "animation": ("string", "string"),
    "component": ("any", "Record<string, any>"),
}


def sanitize_type_name(name: str) -> str:
    """PascalCase 型別名稱；非英數字元視為分隔，數字開頭補 '_'."""
    words = _TYPE_NAME_INVALID.sub(" ", name).split(" ")
    result = "".join(w[:1].upper() + w[1:].lower() for w in words)
    if result[:1].isdigit():
        result = "_" + result
    return result


def ts_type(token_type: str, strict: bool = False) -> str:
    loose, strict_type = _TS_TYPES.get(token_type, ("any", "unknown"))
    return strict_type if strict else loose


def _ts_literal(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    return _json_compact(value)


def _jsdoc(text: str, indent: str = "  ") -> List[str]:
    return [f"{indent}/**", f"{indent} * {text}", f"{indent} */"]


def to_typed_namespace(
    groups: List[DesignTokenGroup],
    namespace: str = "FigmaTokens",
    include_descriptions: bool = False,
    include_metadata: bool = False,
    strict: bool = False,
    generated_at: Optional[str] = None,
) -> str:
    """群組 → `export namespace {namespace}`：每群組一個 interface、as const 值與 Token 型別.

    generated_at 預設為目前 UTC 時間（ISO 8601），測試可固定。
    """
    if generated_at is None:
        generated_at = datetime.now(timezone.utc).isoformat()

    lines = [
        "/**",
        " * Auto-generated TypeScript types from Figma design tokens",
        f" * Generated on: {generated_at}",
        " * Source: Figma design system",
        " */",
        "",
        "",
        f"export namespace {namespace} {{",
        "",
    ]

    type_names = []
    for group in groups:
        type_name = sanitize_type_name(group.name)
        const_name = type_name.lower()
        type_names.append(type_name)

        lines += _jsdoc(group.description or f"{type_name} design tokens")
        lines.append(f"  export interface {type_name} {{")
        for token in group.tokens:
            if include_descriptions and token.description:
                lines += _jsdoc(token.description, indent="    ")
            lines.append(f"    {sanitize_type_name(token.name)}: {ts_type(token.type, strict)};")
        lines += ["  }", ""]

        lines += _jsdoc(f"{type_name} token values")
        lines.append(f"  export const {const_name}: {type_name} = {{")
        for token in group.tokens:
            lines.append(f"    {sanitize_type_name(token.name)}: {_ts_literal(token.value)},")
        lines += ["  } as const;", ""]

        lines += _jsdoc(f"{type_name} token type")
        lines.append(
            f"  export type {type_name}Token = typeof {const_name}[keyof typeof {const_name}];"
        )
        lines.append("")

    lines += _jsdoc("All design token groups")
    lines.append("  export interface DesignTokens {")
    lines += [f"    {t.lower()}: {t};" for t in type_names]
    lines += ["  }", ""]

    lines += _jsdoc("All design tokens")
    lines.append("  export const designTokens: DesignTokens = {")
    lines += [f"    {t.lower()}: {t.lower()}," for t in type_names]
    lines += ["  } as const;", ""]

    lines += _jsdoc("Union type of all token values")
    lines.append(
        "  export type DesignTokenValue = typeof designTokens[keyof typeof designTokens]"
        "[keyof typeof designTokens[keyof typeof designTokens]];"
    )
    lines.append("")

    if include_metadata:
        lines += _jsdoc("Token metadata types")
        lines += [
            "  export interface TokenMetadata {",
            "    name: string;",
            "    type: string;",
            "    description?: string;",
            "    category?: string;",
            "    tags?: string[];",
            "    metadata?: Record<string, any>;",
            "  }",
            "",
        ]

    lines += [
        "}",
        "",
        "// Re-exports for convenience",
        f"export type {{ {namespace}.DesignTokens, {namespace}.DesignTokenValue }};",
        f"export const {{ designTokens }} = {namespace};",
        "",
    ]
    return "\n".join(lines)


def check_extension(output_path: str, fmt: str) -> Optional[str]:
    """副檔名與格式不符時回傳預期副檔名，相符或無法判斷時回傳 None."""
    expected = FORMAT_EXTENSIONS.get(fmt)
    if expected is None or Path(output_path).suffix.lower() == expected:
        return None
    return expected
