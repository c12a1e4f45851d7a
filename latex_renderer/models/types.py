# latex_renderer/models/types.py

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Any, Protocol, Tuple, Union
from pathlib import Path

from markupsafe import Markup


# Type aliases
HTMLString = Markup
SourceSpan = Tuple[int, int]


# Enums for processing
class ProcessingPhase(Enum):
    """Phases of a single transformation pass"""
    EXTRACTION = "extraction"
    TRANSFORMATION = "transformation"
    SEGMENTATION = "segmentation"
    RENDERING = "rendering"
    ERROR = "error"


class Alignment(Enum):
    """Horizontal alignment of a table column or cell."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @classmethod
    def from_letter(cls, letter: str) -> 'Alignment':
        """Map a column-spec letter to an alignment, centering anything unknown."""
        if letter in ('l', 'p', 'm', 'b'):
            return cls.LEFT
        if letter == 'r':
            return cls.RIGHT
        return cls.CENTER


class SegmentType(Enum):
    """Kinds of output segments handed to the rendering collaborator."""
    PLAIN_TEXT = "plain_text"
    INLINE_MATH = "inline_math"
    DISPLAY_MATH = "display_math"
    STRUCTURAL_BLOCK = "structural_block"


# Environment types
@dataclass(frozen=True)
class EnvironmentRecord:
    """A `\\begin{name}...\\end{name}` block lifted out of the source text."""
    name: str
    raw_options: str
    raw_content: str
    source_span: SourceSpan
    token: str = ""

    @property
    def source(self) -> str:
        """The block exactly as it appeared in the source."""
        return f"\\begin{{{self.name}}}{self.raw_options}{self.raw_content}\\end{{{self.name}}}"


@dataclass
class ExtractionResult:
    """Text with environments replaced by placeholder tokens."""
    text: str
    records: List[EnvironmentRecord] = field(default_factory=list)


@dataclass
class ListItem:
    body: str
    term: Optional[str] = None


# Table types
@dataclass(frozen=True)
class ColumnSpec:
    alignment: Alignment
    border_before: bool = False


@dataclass
class TableCell:
    content: str
    column_span: int = 1
    alignment: Alignment = Alignment.CENTER
    has_math_content: bool = False

    def __post_init__(self):
        if self.column_span < 1:
            self.column_span = 1


@dataclass
class TableRow:
    cells: List[TableCell] = field(default_factory=list)
    has_rule_above: bool = False


# Segment types
@dataclass(frozen=True)
class Segment:
    """
    One unit of rendered output.

    PLAIN_TEXT and STRUCTURAL_BLOCK content is HTML-safe. INLINE_MATH and
    DISPLAY_MATH content is the raw formula, unescaped.
    """
    segment_type: SegmentType
    content: str

    @property
    def is_math(self) -> bool:
        return self.segment_type in (SegmentType.INLINE_MATH, SegmentType.DISPLAY_MATH)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.segment_type.value, "content": str(self.content)}


@dataclass
class RenderedLine:
    """Segments produced for one line of source text."""
    index: int
    segments: List[Segment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "segments": [segment.to_dict() for segment in self.segments]
        }


# Error types
class ProcessingError(Exception):
    """Custom error for processing failures"""
    def __init__(
        self,
        error_type: str,
        message: str,
        context: Union[str, Path],
        element_id: Optional[str] = None,
        stacktrace: Optional[str] = None
    ):
        self.error_type = error_type
        self.message = message
        self.context = context
        self.element_id = element_id
        self.stacktrace = stacktrace
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "context": str(self.context),
            "element_id": self.element_id
        }


# Rendering collaborator
class MathRenderer(Protocol):
    """Turns one raw formula into a safe HTML fragment."""

    macros: Dict[str, str]

    def render(self, formula: str, display: bool, equation_id: Optional[str] = None) -> HTMLString:
        ...
