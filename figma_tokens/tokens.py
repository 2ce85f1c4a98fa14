"""Design token 資料結構."""

from dataclasses import dataclass, field
from typing import Any, List, Optional

TOKEN_TYPES = ("color", "spacing", "typography", "component")


@dataclass(frozen=True)
class DesignToken:
    name: str
    value: Any
    type: str
    category: str
    description: Optional[str] = None
    tags: tuple = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.type not in TOKEN_TYPES:
            raise ValueError(f"unknown token type '{self.type}'")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "value": self.value,
            "type": self.type,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
        }


@dataclass
class DesignTokenGroup:
    """同一類別的 token 集合；每個 token 的 type 必須等於群組 category."""
    name: str
    category: str
    tokens: List[DesignToken]
    description: Optional[str] = None

    def __post_init__(self) -> None:
        for token in self.tokens:
            if token.type != self.category:
                raise ValueError(
                    f"token '{token.name}' has type '{token.type}', "
                    f"group '{self.name}' expects '{self.category}'"
                )

    def __len__(self) -> int:
        return len(self.tokens)

    def to_dict(self) -> dict:
        # 鍵順序與既有 JS 工具輸出的 JSON 相同
        return {
            "name": self.name,
            "tokens": [t.to_dict() for t in self.tokens],
            "category": self.category,
            "description": self.description,
        }


def count_tokens(groups: List[DesignTokenGroup]) -> int:
    return sum(len(g.tokens) for g in groups)
