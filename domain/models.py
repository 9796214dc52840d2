from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

DEFAULT_SCENE_WIDTH = 800.0
DEFAULT_SCENE_HEIGHT = 600.0
DEFAULT_BACKGROUND = "#FAF8F5"
DEFAULT_TITLE = "diagram"

SHAPE_TYPES = ("rectangle", "ellipse", "diamond")
ELEMENT_TYPES = (*SHAPE_TYPES, "arrow", "line", "text")
SIDES = ("top", "bottom", "left", "right")

Side = Literal["top", "bottom", "left", "right"]
TextAnchor = Literal["start", "middle", "end"]

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    slug = _SLUG_PATTERN.sub("-", title.lower()).strip("-")
    return slug or DEFAULT_TITLE


def coerce_reference(value: Any) -> Any:
    """Numeric element ids and arrow endpoints become strings."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class SceneModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ElementBase(SceneModel):
    id: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    fill: Optional[str] = None
    fill_style: Optional[str] = None
    roughness: Optional[float] = None
    seed: Optional[int] = None
    font_size: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return coerce_reference(value)


class ShapeElement(ElementBase):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rounded: bool = False
    label: Optional[str] = None
    annotation: Optional[str] = None
    annotation_size: Optional[float] = None
    section_label: Optional[str] = None
    section_label_size: float = 14.0
    section_label_color: str = "#555"


class RectangleElement(ShapeElement):
    type: Literal["rectangle"] = "rectangle"


class EllipseElement(ShapeElement):
    """Ellipse whose ``x``/``y`` name the centre, not the top-left corner."""

    type: Literal["ellipse"] = "ellipse"


class DiamondElement(ShapeElement):
    type: Literal["diamond"] = "diamond"


class ArrowElement(ElementBase):
    type: Literal["arrow"] = "arrow"
    from_id: Optional[str] = Field(default=None, alias="from")
    to_id: Optional[str] = Field(default=None, alias="to")
    from_side: Optional[Side] = None
    to_side: Optional[Side] = None
    label: Optional[str] = None

    @field_validator("from_id", "to_id", mode="before")
    @classmethod
    def coerce_endpoint(cls, value: Any) -> Any:
        return coerce_reference(value)


class LineElement(ElementBase):
    type: Literal["line"] = "line"
    points: Optional[List[Tuple[float, float]]] = None
    x: Optional[float] = None
    y: Optional[float] = None
    x1: Optional[float] = None
    y1: Optional[float] = None
    x2: Optional[float] = None
    y2: Optional[float] = None

    def resolved_points(self) -> list[tuple[float, float]]:
        if self.points is not None:
            return [(float(px), float(py)) for px, py in self.points]
        start_x = self.x1 if self.x1 is not None else self.x
        start_y = self.y1 if self.y1 is not None else self.y
        coords = (start_x, start_y, self.x2, self.y2)
        if any(value is None for value in coords):
            return []
        return [(start_x, start_y), (self.x2, self.y2)]  # type: ignore[list-item]


class TextElement(ElementBase):
    type: Literal["text"] = "text"
    x: float = 0.0
    y: float = 0.0
    text: str = ""
    subtitle: Optional[str] = None
    subtitle_size: Optional[float] = None
    subtitle_color: Optional[str] = None
    align: TextAnchor = "middle"
    color: Optional[str] = None
    font_weight: Optional[str] = None
    max_width: Optional[float] = None


class UnsupportedElement(SceneModel):
    """Placeholder for an input element that could not be used."""

    type: Literal["unsupported"] = "unsupported"
    id: Optional[str] = None
    original_type: Optional[str] = None
    reason: str = ""


Shape = Union[RectangleElement, EllipseElement, DiamondElement]

Element = Annotated[
    Union[
        RectangleElement,
        EllipseElement,
        DiamondElement,
        ArrowElement,
        LineElement,
        TextElement,
        UnsupportedElement,
    ],
    Field(discriminator="type"),
]

_ELEMENT_ADAPTER: TypeAdapter[Element] = TypeAdapter(Element)


def parse_element(raw: Any) -> Element:
    """Validate one raw element, degrading to ``UnsupportedElement`` on failure."""
    if isinstance(raw, BaseModel):
        return raw  # type: ignore[return-value]
    if not isinstance(raw, dict):
        return UnsupportedElement(reason=f"element must be an object, got {type(raw).__name__}")
    type_name = raw.get("type")
    element_id = coerce_reference(raw.get("id"))
    if not isinstance(element_id, str):
        element_id = None
    if type_name not in ELEMENT_TYPES:
        return UnsupportedElement(
            id=element_id,
            original_type=str(type_name) if type_name is not None else None,
            reason=f"unknown element type: {type_name}",
        )
    try:
        return _ELEMENT_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        return UnsupportedElement(
            id=element_id,
            original_type=type_name,
            reason=f"invalid {type_name} element: {exc.error_count()} validation error(s)",
        )


class Scene(SceneModel):
    width: float = Field(default=DEFAULT_SCENE_WIDTH, gt=0)
    height: float = Field(default=DEFAULT_SCENE_HEIGHT, gt=0)
    background: str = DEFAULT_BACKGROUND
    title: str = DEFAULT_TITLE
    elements: List[Element] = Field(default_factory=list)

    @field_validator("width", "height", mode="before")
    @classmethod
    def default_falsy_dimensions(cls, value: object, info: ValidationInfo) -> object:
        if value is None or value == 0:
            return DEFAULT_SCENE_WIDTH if info.field_name == "width" else DEFAULT_SCENE_HEIGHT
        return value

    @field_validator("background", "title", mode="before")
    @classmethod
    def default_empty_strings(cls, value: object, info: ValidationInfo) -> object:
        if value is None or value == "":
            return DEFAULT_BACKGROUND if info.field_name == "background" else DEFAULT_TITLE
        return value

    @field_validator("elements", mode="before")
    @classmethod
    def parse_elements(cls, value: object) -> list[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            msg = "scene.elements must be a list"
            raise ValueError(msg)
        return [parse_element(item) for item in value]

    @property
    def slug(self) -> str:
        return slugify(self.title)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    w: float
    h: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.w / 2, self.y + self.h / 2)

    def side_midpoint(self, side: str) -> Point:
        if side == "top":
            return Point(self.x + self.w / 2, self.y)
        if side == "bottom":
            return Point(self.x + self.w / 2, self.y + self.h)
        if side == "left":
            return Point(self.x, self.y + self.h / 2)
        if side == "right":
            return Point(self.x + self.w, self.y + self.h / 2)
        msg = f"Unknown side: {side}"
        raise ValueError(msg)

    def overlaps(self, other: Bounds) -> bool:
        return (
            self.x < other.x + other.w
            and self.x + self.w > other.x
            and self.y < other.y + other.h
            and self.y + self.h > other.y
        )


@dataclass(frozen=True)
class SidePair:
    from_side: str
    to_side: str


@dataclass(frozen=True)
class StrokeStyle:
    stroke: str
    stroke_width: float
    fill: str | None
    fill_style: str
    roughness: float
    seed: int


@dataclass(frozen=True)
class TextRun:
    x: float
    y: float
    text: str
    font_size: float
    color: str
    mono: bool = False
    anchor: str = "middle"
    font_weight: str | None = None


@dataclass(frozen=True)
class ShapeInstruction:
    """One primitive for the stroke renderer.

    ``primitive`` is one of ``rectangle``, ``ellipse``, ``polygon``, ``line``
    or ``path``. Rectangles and ellipses use ``bounds``; polygons and lines use
    ``points``; paths use ``path``.
    """

    primitive: str
    style: StrokeStyle
    bounds: Bounds | None = None
    points: Tuple[Tuple[float, float], ...] = ()
    path: str | None = None


DrawInstruction = Union[ShapeInstruction, TextRun]


@dataclass(frozen=True)
class SkippedElement:
    index: int
    element_type: str | None
    reason: str


@dataclass(frozen=True)
class DrawingPlan:
    width: float
    height: float
    background: str
    slug: str
    instructions: List[DrawInstruction] = field(default_factory=list)
    skipped: List[SkippedElement] = field(default_factory=list)

    def text_runs(self) -> list[TextRun]:
        return [item for item in self.instructions if isinstance(item, TextRun)]

    def shapes(self) -> list[ShapeInstruction]:
        return [item for item in self.instructions if isinstance(item, ShapeInstruction)]


@dataclass(frozen=True)
class RenderedScene:
    slug: str
    svg: bytes
    png: bytes | None


class SceneFormatError(ValueError):
    """Raised when a scene document cannot be read at all."""
