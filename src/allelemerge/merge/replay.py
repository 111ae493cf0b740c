"""Replay of a splice template against one allele's own genomic and coding rows."""
from typing import Sequence

from allelemerge import AlleleMergeError
from allelemerge.core.token import Token, Boundary, tokens_to_string
from allelemerge.core.region import Region, FillFromGenomic, MergeCodingIntoGenomic, Instruction


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class ReplayError(AlleleMergeError):
    """Raised when an allele's rows do not fit the template."""


# Functions ------------------------------------------------------------------------------------------------------------
def split_at_boundary(tokens: Sequence[Token], position: int, offset: int = 0) -> tuple[list[Token], Sequence[Token]]:
    """
    Splits ``tokens`` at the first boundary declared at ``position``.

    The tokens before it are shifted by ``offset``; the boundary itself is dropped. Without such a
    boundary everything is returned as the prefix.

    Args:
        tokens: The remaining raw tokens of one row.
        position: Raw-coordinate position of the boundary that closes the region.
        offset: Shift into merged coordinates.

    Returns:
        ``(shifted prefix, remainder after the boundary)``.
    """
    for i, token in enumerate(tokens):
        if isinstance(token, Boundary) and token.pos == position:
            return [t.shift(offset) for t in tokens[:i]], tokens[i + 1:]
    return [t.shift(offset) for t in tokens], ()


def _cut(region: Region, tokens: Sequence[Token]) -> tuple[Region, Sequence[Token]]:
    # marker.end is the raw-space position of the closing boundary, i.e. merged_end - offset
    before, after = split_at_boundary(tokens, region.marker.end, region.offset)
    return region.with_payload(before), after


def map_instr_to_alignments(template: Sequence[Instruction], gen: Sequence[Token], nuc: Sequence[Token],
                            fail_on_empty: bool = True) -> list[Instruction]:
    """
    Re-slices one allele's rows at the template's boundaries.

    Each fill consumes the genomic row up to its closing boundary; each merge consumes both rows. The
    consumed tokens become the instruction's payload, already shifted into merged coordinates. The
    closing boundaries are dropped, renderers re-insert them from the markers.

    Args:
        template: Output of ``zip_align``.
        gen: The allele's genomic tokens (or a donor's).
        nuc: The allele's coding tokens.
        fail_on_empty: Require both rows to be fully consumed; disable for intentionally partial replays.

    Returns:
        The allele's concrete instructions, with token-list payloads.

    Raises:
        ReplayError: If the template does not begin with the sentinel fill or tokens are left over.
    """
    if not template: raise ReplayError('Empty instructions')
    first = template[0]
    if not (isinstance(first, FillFromGenomic) and first.marker.is_before_start):
        raise ReplayError(f'Did not start with a "starting" FillFromGenomic but {first}')
    instructions = []
    for instruction in template:
        if isinstance(instruction, FillFromGenomic):
            region, gen = _cut(instruction.region, gen)
            instructions.append(FillFromGenomic(region))
        else:
            genomic, gen = _cut(instruction.genomic, gen)
            coding, nuc = _cut(instruction.coding, nuc)
            instructions.append(MergeCodingIntoGenomic(coding=coding, genomic=genomic))
    if fail_on_empty and gen:
        raise ReplayError(f'After all instructions genomic not empty: {tokens_to_string(gen)}.')
    if fail_on_empty and nuc:
        raise ReplayError(f'After all instructions coding sequence not empty: {tokens_to_string(nuc)}.')
    return instructions
