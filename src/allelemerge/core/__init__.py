"""Value types: alignment tokens, boundary markers, regions and merge instructions."""
from allelemerge.core.token import (
    Token, TokenKind, TokenBatch, Boundary, Start, End, Gap, Sequence, short_text, tokens_to_string, only_gaps
)
from allelemerge.core.region import (
    BoundaryMarker, BEFORE_START, Region, Instruction, FillFromGenomic, MergeCodingIntoGenomic
)
