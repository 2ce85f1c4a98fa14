"""
Token 擷取 — color / spacing / typography / component

前三者以深度優先（前序）走訪文件樹；component 直接走 file.components。
token 名稱不保證唯一：同名節點會產生相同名稱，預設保留（見 find_name_collisions）。
"""

import math
from collections import Counter
from typing import Dict, Iterator, List, Mapping

from .schema import ComponentMeta, Node
from .tokens import DesignToken


def round_half_up(value: float) -> int:
    """0.5 一律進位（Python round() 為銀行家捨入，127.5 與 2.5 結果不同）."""
    return int(math.floor(value + 0.5))


def rgba_to_hex(r: float, g: float, b: float, a: float = 1.0) -> str:
    """#rrggbb；a < 1 時附加 alpha byte 成為 #rrggbbaa."""

    def to_hex(channel: float) -> str:
        byte = min(255, max(0, round_half_up(channel * 255)))
        return f"{byte:02x}"

    hex_color = f"#{to_hex(r)}{to_hex(g)}{to_hex(b)}"
    if a < 1:
        return f"{hex_color}{to_hex(a)}"
    return hex_color


def walk(node: Node) -> Iterator[Node]:
    """前序走訪；children 依原始順序."""
    yield node
    for child in node.children:
        yield from walk(child)


def _paint_tokens(node: Node, paints, role: str, description: str) -> List[DesignToken]:
    tokens = []
    for index, paint in enumerate(paints or []):
        if not paint.is_solid:
            continue
        c = paint.color
        tokens.append(DesignToken(
            name=f"{node.name}_{role}_{index}",
            value=rgba_to_hex(c.r, c.g, c.b, c.a),
            type="color",
            category="color",
            description=f"{description} {node.name}",
            tags=(role, node.type),
        ))
    return tokens


def extract_color_tokens(root: Node) -> List[DesignToken]:
    tokens: List[DesignToken] = []
    for node in walk(root):
        tokens.extend(_paint_tokens(node, node.fills, "fill", "Color from"))
        tokens.extend(_paint_tokens(node, node.strokes, "stroke", "Stroke color from"))
    return tokens


def extract_spacing_tokens(root: Node) -> List[DesignToken]:
    tokens: List[DesignToken] = []

    def add(node: Node, suffix: str, value: float, label: str) -> None:
        tokens.append(DesignToken(
            name=f"{node.name}_{suffix}",
            value=round_half_up(value),
            type="spacing",
            category="spacing",
            description=f"{label} of {node.name}",
            tags=(suffix, node.type),
        ))

    for node in walk(root):
        bbox = node.absoluteBoundingBox
        if bbox is not None:
            if bbox.width > 0:
                add(node, "width", bbox.width, "Width")
            if bbox.height > 0:
                add(node, "height", bbox.height, "Height")
        if node.cornerRadius and node.cornerRadius > 0:
            add(node, "radius", node.cornerRadius, "Corner radius")
    return tokens


def extract_typography_tokens(root: Node) -> List[DesignToken]:
    # 只記錄 style 參照；解析實際字型需要額外的 /styles API 呼叫
    tokens: List[DesignToken] = []
    for node in walk(root):
        style_ref = node.text_style
        if style_ref:
            tokens.append(DesignToken(
                name=f"{node.name}_text_style",
                value=style_ref,
                type="typography",
                category="typography",
                description=f"Text style from {node.name}",
                tags=("text-style", node.type),
            ))
    return tokens


def extract_component_tokens(components: Mapping[str, ComponentMeta]) -> List[DesignToken]:
    tokens: List[DesignToken] = []
    for component_id, component in components.items():
        tokens.append(DesignToken(
            name=component.name,
            value={
                "id": component_id,
                "type": component.type,
                "description": f"Component: {component.name}",
            },
            type="component",
            category="component",
            description=f"Figma component: {component.name}",
            tags=("component", component.type),
        ))
    return tokens


def find_name_collisions(tokens: List[DesignToken]) -> Dict[str, int]:
    """回傳出現超過一次的 token 名稱與次數."""
    counts = Counter(t.name for t in tokens)
    return {name: n for name, n in counts.items() if n > 1}
