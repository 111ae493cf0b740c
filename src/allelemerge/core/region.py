"""Boundary markers, regions and the two merge instructions a splice template is made of."""
from dataclasses import dataclass, replace
from typing import Generic, TypeVar, Union, Callable

from allelemerge.core.token import Token, Boundary, short_text, tokens_to_string

T = TypeVar('T')


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class BoundaryMarker:
    """
    The boundary that opens a segment.

    Attributes:
        index: Which segment follows (0-based exon/intron index, -1 before the first boundary).
        position: Position of the boundary column.
        length: Columns up to the next boundary, i.e. the span of the segment plus its own boundary column.
    """
    index: int
    position: int
    length: int = 0

    @property
    def is_before_start(self) -> bool: return self.index == -1
    @property
    def end(self) -> int:
        """Position of the next boundary."""
        return self.position + self.length

    def extend(self, n: int) -> 'BoundaryMarker': return replace(self, length=self.length + n)

    def to_boundary(self, offset: int = 0) -> Boundary:
        return Boundary(self.index, self.position + offset)

    def matches(self, token: Token) -> bool:
        return isinstance(token, Boundary) and token.index == self.index and token.pos == self.position

    def __str__(self): return f"{{index: {self.index}; position: {self.position}; length: {self.length}}}"


BEFORE_START = BoundaryMarker(-1, -1)


@dataclass(frozen=True, slots=True)
class Region(Generic[T]):
    """
    A segment addressed by its boundary marker, with the shift that places it in merged coordinates.

    The payload is the segment's residue text in a template and its token list in a replay.
    """
    marker: BoundaryMarker
    offset: int
    payload: T

    @property
    def merged_start(self) -> int: return self.marker.position + self.offset
    @property
    def merged_end(self) -> int: return self.marker.end + self.offset
    def with_payload(self, payload) -> 'Region': return Region(self.marker, self.offset, payload)

    def describe(self, payload_to_string: Callable[[T], str] = None) -> str:
        p = payload_to_string(self.payload) if payload_to_string else _payload_to_string(self.payload)
        return f"{{marker: {self.marker}; offset: {self.offset}; payload: {p}}}"

    def __str__(self): return self.describe()


@dataclass(frozen=True, slots=True)
class FillFromGenomic(Generic[T]):
    """Copy the genomic segment into the merged output as is."""
    region: Region[T]

    @property
    def marker(self) -> BoundaryMarker: return self.region.marker
    def __str__(self): return f"FillFromGenomic {self.region}"


@dataclass(frozen=True, slots=True)
class MergeCodingIntoGenomic(Generic[T]):
    """Replace the genomic segment's interior with the coding segment, keeping the genomic boundary."""
    coding: Region[T]
    genomic: Region[T]

    @property
    def marker(self) -> BoundaryMarker: return self.genomic.marker
    def __str__(self): return f"MergeCodingIntoGenomic {{coding: {self.coding}; genomic: {self.genomic}}}"


Instruction = Union[FillFromGenomic, MergeCodingIntoGenomic]


# Functions ------------------------------------------------------------------------------------------------------------
def _payload_to_string(payload) -> str:
    if isinstance(payload, bytes): return short_text(payload)
    if isinstance(payload, (list, tuple)): return f"[{tokens_to_string(payload)}]"
    return repr(payload)
