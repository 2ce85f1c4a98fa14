"""
Token 服務 — 擷取流程與檔案驗證

extract_design_tokens：取檔 → 四個 extractor → 依固定順序組成非空群組。
validate_file：結構檢查，取檔失敗時回報為 issue 而不拋例外。
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

from .errors import FetchError, TokenNameCollisionError
from .extractors import (
    extract_color_tokens,
    extract_component_tokens,
    extract_spacing_tokens,
    extract_typography_tokens,
    find_name_collisions,
    walk,
)
from .figma_reader import FigmaAPIClient
from .schema import DesignFile
from .tokens import DesignToken, DesignTokenGroup


@dataclass
class ValidationResult:
    valid: bool
    issues: List[str] = field(default_factory=list)


@dataclass
class FileAnalysis:
    """validate --detailed 使用的檔案統計."""
    name: str
    version: str
    schema_version: int
    last_modified: str
    node_count: int
    node_types: Dict[str, int]
    component_types: Dict[str, int]
    style_types: Dict[str, int]
    has_color_styles: bool
    has_text_styles: bool
    has_component_variants: bool


# (群組名稱, category, 說明, extractor)；順序即輸出順序
_GROUP_SPECS: List[tuple] = [
    ("colors", "color", "Color tokens extracted from Figma",
     lambda f: extract_color_tokens(f.document)),
    ("spacing", "spacing", "Spacing tokens extracted from Figma",
     lambda f: extract_spacing_tokens(f.document)),
    ("typography", "typography", "Typography tokens extracted from Figma",
     lambda f: extract_typography_tokens(f.document)),
    ("components", "component", "Component tokens extracted from Figma",
     lambda f: extract_component_tokens(f.components)),
]


def tokens_from_file(design_file: DesignFile, strict: bool = False) -> List[DesignTokenGroup]:
    groups = []
    for name, category, description, extract in _GROUP_SPECS:
        tokens: List[DesignToken] = extract(design_file)
        if not tokens:
            continue
        if strict:
            collisions = find_name_collisions(tokens)
            if collisions:
                raise TokenNameCollisionError(name, collisions)
        groups.append(DesignTokenGroup(
            name=name,
            category=category,
            tokens=tokens,
            description=description,
        ))
    return groups


def validate_design_file(design_file: DesignFile) -> ValidationResult:
    issues = []
    if not design_file.components:
        issues.append("No components found in the file")
    if not design_file.styles:
        issues.append("No styles found in the file")
    if design_file.document is None:
        issues.append("No document structure found")
    return ValidationResult(valid=not issues, issues=issues)


def analyze_file(design_file: DesignFile) -> FileAnalysis:
    node_types: Counter = Counter(node.type for node in walk(design_file.document))
    component_types: Counter = Counter(c.type for c in design_file.components.values())
    style_types: Counter = Counter(
        s.styleType or "unknown" for s in design_file.styles.values()
    )
    return FileAnalysis(
        name=design_file.name,
        version=design_file.version,
        schema_version=design_file.schemaVersion,
        last_modified=design_file.lastModified,
        node_count=sum(node_types.values()),
        node_types=dict(node_types),
        component_types=dict(component_types),
        style_types=dict(style_types),
        has_color_styles=any(t in ("FILL", "TEXT") for t in style_types),
        has_text_styles="TEXT" in style_types,
        has_component_variants=any(
            c.componentProperties for c in design_file.components.values()
        ),
    )


class TokenService:
    """將 FigmaAPIClient 與 extractor 串成一次同步."""

    def __init__(self, client: FigmaAPIClient):
        self.client = client

    def fetch_file(self, file_key: str) -> DesignFile:
        return self.client.get_file(file_key)

    def extract_design_tokens(self, file_key: str, strict: bool = False) -> List[DesignTokenGroup]:
        design_file = self.fetch_file(file_key)
        return tokens_from_file(design_file, strict=strict)

    def validate_file(self, file_key: str) -> ValidationResult:
        try:
            design_file = self.fetch_file(file_key)
        except (FetchError, ValueError) as e:
            return ValidationResult(valid=False, issues=[f"Failed to validate file: {e}"])
        return validate_design_file(design_file)
