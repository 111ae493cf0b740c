"""Segmentation of a flat token sequence into boundary-delimited segments."""
from typing import Iterable

from allelemerge.core.token import Token, Boundary, Start, End, Gap, Sequence, short_text
from allelemerge.core.region import BoundaryMarker, BEFORE_START


# Functions ------------------------------------------------------------------------------------------------------------
def bounded(tokens: Iterable[Token]) -> list[tuple[BoundaryMarker, bytes]]:
    """
    Splits tokens at every ``Boundary`` into ``(marker, text)`` pairs.

    Each marker's ``length`` counts the columns up to the next boundary (the segment's own boundary
    column included), so ``marker.position + marker.length`` is where the next segment starts. A
    ``Start`` seen before the first boundary moves the sentinel marker to ``start - 1``.

    Args:
        tokens: One alignment row, starting before any boundary.

    Returns:
        One pair per segment, including the leading sentinel segment and the trailing segment.

    Examples:
        >>> bounded([Start(0), Sequence(0, b'ACG'), Boundary(0, 3), Sequence(4, b'TT'), End(6)])
        [(BoundaryMarker(index=-1, position=-1, length=4), b'ACG'), (BoundaryMarker(index=0, position=3, length=3), b'TT')]
    """
    segments = []
    marker, text = BEFORE_START, []
    for token in tokens:
        if isinstance(token, Boundary):
            segments.append((marker.extend(1), b''.join(text)))
            marker, text = BoundaryMarker(token.index, token.pos), []
        elif isinstance(token, Start):
            if marker.is_before_start: marker = BoundaryMarker(marker.index, token.pos - 1, marker.length)
        elif isinstance(token, End):
            continue
        elif isinstance(token, Gap):
            marker = marker.extend(token.length)
        elif isinstance(token, Sequence):
            marker = marker.extend(len(token.text))
            text.append(token.text)
    segments.append((marker.extend(1), b''.join(text)))
    return segments


def bounded_to_string(segments: Iterable[tuple[BoundaryMarker, bytes]]) -> str:
    return '; '.join(f"({marker}, {short_text(text)})" for marker, text in segments)
