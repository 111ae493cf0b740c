"""
Rendering of concrete instructions into one merged alignment row.

``align_reference`` is the plain flattening used for the reference allele. ``align_same`` is used for
every other allele: it additionally detects where the allele's coding data starts and stops, and
encodes the missing stretches with synthetic ``Start`` / ``End`` tokens and gaps so the result stays
positionally contiguous.
"""
from functools import reduce, partial
from typing import NamedTuple, Sequence, Iterable, Optional

from allelemerge import AlleleMergeError
from allelemerge.core.token import Token, Start, End, Gap, only_gaps, tokens_to_string
from allelemerge.core.region import FillFromGenomic, Instruction


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class RenderError(AlleleMergeError):
    """Raised when an allele's coding payload is malformed around its Start / End tokens."""


# Classes --------------------------------------------------------------------------------------------------------------
class RenderState(NamedTuple):
    """
    State threaded through the ``align_same`` reduction.

    Attributes:
        fragments: Emitted token fragments, newest first.
        inside_coding: The allele has real coding data at the current position.
        need_start: The allele's data was closed by an ``End``; the next fill must reopen it.
    """
    fragments: tuple = ()
    inside_coding: bool = False
    need_start: bool = False

    def push(self, fragment: Iterable[Token], inside_coding: bool, need_start: bool) -> 'RenderState':
        return RenderState((tuple(fragment),) + self.fragments, inside_coding, need_start)

    @property
    def last_position(self) -> Optional[int]:
        """Cursor after the newest emitted token, ``None`` if nothing was emitted yet."""
        for fragment in self.fragments:
            if fragment: return fragment[-1].next_position
        return None

    def tokens(self) -> list[Token]:
        return [t for fragment in reversed(self.fragments) for t in fragment]


# Functions ------------------------------------------------------------------------------------------------------------
def align_reference(instructions: Iterable[Instruction]) -> list[Token]:
    """
    Flattens the reference allele's concrete instructions into the merged reference row.

    Every region except the sentinel is preceded by its boundary in merged coordinates. Coding payloads
    lose their ``Start`` / ``End`` tokens: the merged row's extent comes from the genomic row alone.
    """
    merged = []
    for instruction in instructions:
        if isinstance(instruction, FillFromGenomic):
            region = instruction.region
            if not region.marker.is_before_start: merged.append(region.marker.to_boundary(region.offset))
            merged.extend(region.payload)
        else:
            genomic = instruction.genomic
            merged.append(genomic.marker.to_boundary(genomic.offset))
            # Fine for loci whose reference has a single start (A, B, C); not for restarts as in DRB.
            merged.extend(t for t in instruction.coding.payload if not isinstance(t, (Start, End)))
    return merged


def align_same(name: str, instructions: Iterable[Instruction]) -> list[Token]:
    """
    Flattens an allele's concrete instructions, encoding where its coding data is missing.

    Fill regions are copied with their boundary. For merge regions the coding payload replaces the
    genomic one:

    * Inside coding data, the payload is copied up to an ``End``. An ``End`` on the closing boundary ends
      the data cleanly; an earlier ``End`` must be followed by gaps only and is kept.
    * Outside coding data, a ``Start`` is looked for behind gap-only content. Without one the region is
      missing: an ``End`` is emitted and the next fill is reopened with a ``Start``. A late ``Start`` is
      preceded by an ``End`` and a gap up to it.

    A stale ``End`` is never dropped: residues after an ``End`` in the same region are malformed.

    Args:
        name: Allele name, used in error messages.
        instructions: Output of ``map_instr_to_alignments`` for this allele.

    Returns:
        The merged row.

    Raises:
        RenderError: On non-gap content before a ``Start`` or after an ``End``.
    """
    return reduce(partial(_step, name), instructions, RenderState()).tokens()


def _step(name: str, state: RenderState, instruction: Instruction) -> RenderState:
    if isinstance(instruction, FillFromGenomic):
        region = instruction.region
        if region.marker.is_before_start: return state.push(region.payload, state.inside_coding, False)
        boundary = region.marker.to_boundary(region.offset)
        head = (Start(boundary.pos), boundary) if state.need_start else (boundary,)
        return state.push(head + tuple(region.payload), state.inside_coding, False)

    coding, genomic = instruction.coding, instruction.genomic
    boundary = genomic.marker.to_boundary(genomic.offset)
    region_end = coding.merged_end
    payload = tuple(coding.payload)
    if state.inside_coding: return _close(name, state, (boundary,), payload, region_end)

    i = _index(payload, Start)
    before = payload if i is None else payload[:i]
    if not only_gaps(before):
        raise RenderError(f'In {name} did not find just gaps before start: {tokens_to_string(before)}')
    if i is None:  # No data for this region
        fragment = _end(name, state) + (boundary,) + _pad(boundary.next_position, region_end)
        return state.push(fragment, False, True)
    start, after = payload[i], payload[i + 1:]
    if start.pos == boundary.next_position: return _close(name, state, (boundary,), after, region_end)
    head = _end(name, state) + (boundary,) + _pad(boundary.next_position, start.pos) + (start,)
    return _close(name, state, head, after, region_end)


def _close(name: str, state: RenderState, head: tuple, payload: tuple, region_end: int) -> RenderState:
    j = _index(payload, End)
    if j is None: return state.push(head + payload, True, False)
    end, after = payload[j], payload[j + 1:]
    if end.pos == region_end:
        if after:
            raise RenderError(f'In {name} malformed coding sequence: {tokens_to_string(after)} '
                              f'after end but before next boundary.')
        return state.push(head + payload[:j], False, False)
    if not only_gaps(after):
        raise RenderError(f'In {name} did not find just gaps after end: {tokens_to_string(after)}')
    fragment = head + payload  # Keep the gaps to signal missing data
    return state.push(fragment + _pad(fragment[-1].next_position, region_end), False, True)


def _end(name: str, state: RenderState) -> tuple:
    if state.need_start: return ()  # Already closed
    if (last := state.last_position) is None:
        raise RenderError(f'In {name} nothing emitted before the first merge region')
    return (End(last),)


def _pad(start: int, end: int) -> tuple:
    return (Gap(start, end - start),) if end > start else ()


def _index(tokens: Sequence[Token], kind: type) -> Optional[int]:
    return next((i for i, t in enumerate(tokens) if isinstance(t, kind)), None)
