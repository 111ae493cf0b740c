"""Positional invariant checking of finished alignment rows."""
from typing import Iterable, Union

import numpy as np

from allelemerge import AlleleMergeError
from allelemerge.core.token import Token, TokenKind, TokenBatch
from allelemerge.utils.resources import jit


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class PositionError(AlleleMergeError):
    """
    Raised when a row's tokens are not positionally contiguous.

    Attributes:
        token: The offending token (``None`` for an empty row).
        expected: The cursor position the token should have declared.
    """
    def __init__(self, message: str, token: Token = None, expected: int = None):
        super().__init__(message)
        self.token = token
        self.expected = expected


# Constants ------------------------------------------------------------------------------------------------------------
_SEED_KINDS = (TokenKind.BOUNDARY, TokenKind.START, TokenKind.GAP)


# Functions ------------------------------------------------------------------------------------------------------------
def reference_positions_align(tokens: Union[Iterable[Token], TokenBatch], name: str = None) -> int:
    """
    Verifies that every token starts exactly where the previous one left the cursor.

    The first token (a ``Boundary``, ``Start`` or ``Gap``) seeds the cursor. ``Boundary`` advances it by
    one column, ``Start`` and ``End`` by none, ``Gap`` and ``Sequence`` by their length.

    Args:
        tokens: A merged (or any) alignment row.
        name: Row name used in error messages.

    Returns:
        The cursor after the last token.

    Raises:
        PositionError: On an empty row, a disallowed first token or the first misaligned token.

    Examples:
        >>> reference_positions_align([Start(0), Sequence(0, b'ACGT'), Boundary(0, 4), Gap(5, 3), End(8)])
        8
    """
    batch = tokens if isinstance(tokens, TokenBatch) else TokenBatch.build(tokens)
    prefix = f'For seq {name} ' if name else ''
    if len(batch) == 0: raise PositionError(f'{prefix}empty')
    first = batch[0]
    if first.kind not in _SEED_KINDS: raise PositionError(f"{prefix}can't start with {first}.", first)
    expected = batch.expected_starts()
    if (i := _first_mismatch(batch.starts, expected)) >= 0:
        raise PositionError(f'{prefix}positions are not aligned: {batch[i]}, pos: {expected[i]}',
                            batch[i], int(expected[i]))
    return batch.last_position


def positions_align(tokens: Union[Iterable[Token], TokenBatch]) -> bool:
    """Non-raising form of ``reference_positions_align``."""
    try:
        reference_positions_align(tokens)
        return True
    except PositionError: return False


@jit(nopython=True, cache=True, nogil=True)
def _first_mismatch(starts, expected):
    """Index of the first declared start differing from the expected cursor, or -1."""
    for i in range(len(starts)):
        if starts[i] != expected[i]: return i
    return -1


def misaligned_indices(tokens: Union[Iterable[Token], TokenBatch]) -> np.ndarray:
    """Indices of every token whose declared start differs from the cursor implied by its predecessors."""
    batch = tokens if isinstance(tokens, TokenBatch) else TokenBatch.build(tokens)
    return np.flatnonzero(batch.starts != batch.expected_starts())
