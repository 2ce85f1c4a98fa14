"""
Figma API 回應結構驗證

將 REST API 的原始 JSON 轉成 pydantic 模型；結構不符時拋出
SchemaValidationError（含出錯欄位路徑），由 FigmaAPIClient 轉為 FetchError。
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import SchemaValidationError


class Color(BaseModel):
    r: float
    g: float
    b: float
    a: float = 1.0


class Paint(BaseModel):
    """單一 fill / stroke；只有 SOLID 會被解讀."""
    type: str
    color: Optional[Color] = None
    visible: bool = True
    opacity: Optional[float] = None

    @property
    def is_solid(self) -> bool:
        return self.type == "SOLID" and self.color is not None


class BoundingBox(BaseModel):
    x: float = 0
    y: float = 0
    width: float
    height: float


class Node(BaseModel):
    """文件樹節點；children 由父節點獨佔（樹狀、無循環）."""
    id: str
    name: str
    type: str
    visible: Optional[bool] = None
    fills: Optional[List[Paint]] = None
    strokes: Optional[List[Paint]] = None
    strokeWeight: Optional[float] = None
    cornerRadius: Optional[float] = None
    absoluteBoundingBox: Optional[BoundingBox] = None
    styles: Optional[Dict[str, str]] = None
    componentId: Optional[str] = None
    componentProperties: Optional[Dict[str, Any]] = None
    children: List["Node"] = Field(default_factory=list)

    @property
    def text_style(self) -> Optional[str]:
        return (self.styles or {}).get("text")


Node.model_rebuild()


class ComponentMeta(BaseModel):
    name: str
    key: Optional[str] = None
    description: Optional[str] = None
    type: str = "COMPONENT"
    componentSetId: Optional[str] = None
    componentProperties: Optional[Dict[str, Any]] = None


class StyleMeta(BaseModel):
    name: Optional[str] = None
    key: Optional[str] = None
    styleType: Optional[str] = None
    description: Optional[str] = None


class DesignFile(BaseModel):
    """一次同步所讀取的 Figma 檔案快照."""
    name: str
    version: str
    lastModified: str
    document: Node
    components: Dict[str, ComponentMeta] = Field(default_factory=dict)
    styles: Dict[str, StyleMeta] = Field(default_factory=dict)
    schemaVersion: int = 0
    thumbnailUrl: Optional[str] = None

    @field_validator("components", "styles", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class ProjectFile(BaseModel):
    key: str
    name: str
    thumbnailUrl: Optional[str] = None
    lastModified: Optional[str] = None


class ProjectSummary(BaseModel):
    id: str
    name: str
    files: List[ProjectFile] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        # Figma 部分端點回傳數字 id
        return str(value) if isinstance(value, int) and not isinstance(value, bool) else value


class TeamProjectsSummary(BaseModel):
    name: Optional[str] = None
    projects: List[ProjectSummary] = Field(default_factory=list)

    @field_validator("projects", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def _first_error(err: ValidationError) -> SchemaValidationError:
    first = err.errors()[0]
    path = ".".join(str(part) for part in first.get("loc", ()))
    return SchemaValidationError(path, first.get("msg", "invalid value"))


def _parse(model: type, payload: Any):
    if not isinstance(payload, dict):
        raise SchemaValidationError("", f"expected a JSON object, got {type(payload).__name__}")
    try:
        return model.model_validate(payload)
    except ValidationError as err:
        raise _first_error(err) from err


def parse_file(payload: Any) -> DesignFile:
    return _parse(DesignFile, payload)


def parse_project(payload: Any) -> ProjectSummary:
    return _parse(ProjectSummary, payload)


def parse_team_projects(payload: Any) -> TeamProjectsSummary:
    return _parse(TeamProjectsSummary, payload)
