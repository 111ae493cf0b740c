"""
Alignment tokens: the position-tagged elements a multiple sequence alignment row is made of.

All positions live in one shared integer coordinate space. A ``Boundary`` occupies the single
column of the exon/intron separator, ``Start`` and ``End`` occupy none, and ``Gap`` / ``Sequence``
occupy their length.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Union, Sequence as SequenceType

import numpy as np

from allelemerge.containers import Batch


# Classes --------------------------------------------------------------------------------------------------------------
class TokenKind(IntEnum):
    """Discriminator for the five token variants, also used as the ``kinds`` column of a TokenBatch."""
    BOUNDARY = 0
    START = 1
    END = 2
    GAP = 3
    SEQUENCE = 4


class Token:
    """
    Base class for alignment tokens.

    Subclasses are frozen and slotted; ``shift`` returns a re-tagged copy, tokens are never mutated.
    """
    __slots__ = ()
    kind: TokenKind

    @property
    def position(self) -> int:
        """The declared start position of this token."""
        raise NotImplementedError

    @property
    def advance(self) -> int:
        """How many coordinate columns this token occupies."""
        return 0

    @property
    def next_position(self) -> int:
        """The coordinate cursor immediately after this token."""
        return self.position + self.advance

    def shift(self, offset: int) -> 'Token':
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Boundary(Token):
    """An exon/intron border at ``position``; ``index`` is the segment that follows."""
    index: int
    pos: int
    kind = TokenKind.BOUNDARY

    @property
    def position(self) -> int: return self.pos
    @property
    def advance(self) -> int: return 1
    def shift(self, offset: int) -> 'Boundary': return Boundary(self.index, self.pos + offset)
    def __str__(self): return f"Boundary(idx={self.index}, pos={self.pos})"


@dataclass(frozen=True, slots=True)
class Start(Token):
    """The allele's sequence begins at ``pos``."""
    pos: int
    kind = TokenKind.START

    @property
    def position(self) -> int: return self.pos
    def shift(self, offset: int) -> 'Start': return Start(self.pos + offset)
    def __str__(self): return f"Start({self.pos})"


@dataclass(frozen=True, slots=True)
class End(Token):
    """The allele's sequence ends at ``pos``."""
    pos: int
    kind = TokenKind.END

    @property
    def position(self) -> int: return self.pos
    def shift(self, offset: int) -> 'End': return End(self.pos + offset)
    def __str__(self): return f"End({self.pos})"


@dataclass(frozen=True, slots=True)
class Gap(Token):
    """``length`` columns of missing or unknown data starting at ``start``."""
    start: int
    length: int
    kind = TokenKind.GAP

    @property
    def position(self) -> int: return self.start
    @property
    def advance(self) -> int: return self.length
    def shift(self, offset: int) -> 'Gap': return Gap(self.start + offset, self.length)
    def __str__(self): return f"Gap(start={self.start}, length={self.length})"


@dataclass(frozen=True, slots=True)
class Sequence(Token):
    """Literal residues ``text`` starting at ``start``."""
    start: int
    text: bytes
    kind = TokenKind.SEQUENCE

    def __post_init__(self):
        if isinstance(self.text, str): object.__setattr__(self, 'text', self.text.encode('ascii'))

    @property
    def position(self) -> int: return self.start
    @property
    def advance(self) -> int: return len(self.text)
    def shift(self, offset: int) -> 'Sequence': return Sequence(self.start + offset, self.text)
    def __str__(self): return f"Sequence(start={self.start}, text={short_text(self.text)})"


class TokenBatch(Batch):
    """
    Columnar view of a token sequence.

    Stores the kind, declared start and column advance of every token in parallel numpy arrays so
    positional arithmetic (spans, contiguity) can be done without walking Python objects.

    Examples:
        >>> batch = TokenBatch.build([Start(0), Sequence(0, b'ACGT'), End(4)])
        >>> batch.span
        4
    """
    __slots__ = ('_tokens', '_kinds', '_starts', '_advances')

    def __init__(self, tokens: SequenceType[Token], kinds: np.ndarray, starts: np.ndarray, advances: np.ndarray):
        self._tokens = tokens
        self._kinds = kinds
        self._starts = starts
        self._advances = advances

    @property
    def component(self): return Token
    @property
    def kinds(self) -> np.ndarray: return self._kinds
    @property
    def starts(self) -> np.ndarray: return self._starts
    @property
    def advances(self) -> np.ndarray: return self._advances
    def __len__(self) -> int: return len(self._tokens)
    def __repr__(self): return f"TokenBatch({len(self)} tokens, span={self.span})"

    def __getitem__(self, item: Union[int, slice]) -> Union[Token, 'TokenBatch']:
        if isinstance(item, slice):
            return TokenBatch(self._tokens[item], self._kinds[item], self._starts[item], self._advances[item])
        return self._tokens[item]

    @classmethod
    def empty(cls) -> 'TokenBatch':
        return cls((), np.empty(0, dtype=np.uint8), np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64))

    @classmethod
    def build(cls, components: Iterable[Token]) -> 'TokenBatch':
        """
        Constructs a TokenBatch from an iterable of tokens.

        Args:
            components: An iterable of ``Token`` objects.

        Returns:
            A new ``TokenBatch`` preserving the input order.
        """
        tokens = tuple(components)
        if not tokens: return cls.empty()
        n = len(tokens)
        kinds = np.empty(n, dtype=np.uint8)
        starts = np.empty(n, dtype=np.int64)
        advances = np.empty(n, dtype=np.int64)
        for i, t in enumerate(tokens):
            kinds[i] = t.kind
            starts[i] = t.position
            advances[i] = t.advance
        return cls(tokens, kinds, starts, advances)

    @classmethod
    def concat(cls, batches: Iterable['TokenBatch']) -> 'TokenBatch':
        batches = list(batches)
        if not batches: return cls.empty()
        return cls(
            tuple(t for b in batches for t in b._tokens),
            np.concatenate([b._kinds for b in batches]),
            np.concatenate([b._starts for b in batches]),
            np.concatenate([b._advances for b in batches])
        )

    @property
    def first_position(self) -> int:
        if len(self) == 0: raise IndexError('Empty TokenBatch has no first position')
        return int(self._starts[0])

    @property
    def last_position(self) -> int:
        """The cursor after the final token."""
        if len(self) == 0: raise IndexError('Empty TokenBatch has no last position')
        return int(self._starts[-1] + self._advances[-1])

    @property
    def span(self) -> int:
        """Total number of coordinate columns the tokens occupy."""
        return int(self._advances.sum())

    def expected_starts(self, seed: int = None) -> np.ndarray:
        """
        The start position each token must declare for the sequence to be contiguous.

        Args:
            seed: The cursor before the first token; defaults to the first token's own position.

        Returns:
            An ``int64`` array aligned with ``starts``.
        """
        if len(self) == 0: return np.empty(0, dtype=np.int64)
        if seed is None: seed = self.first_position
        expected = np.empty(len(self), dtype=np.int64)
        expected[0] = seed
        np.cumsum(self._advances[:-1], out=expected[1:])
        expected[1:] += seed
        return expected

    def count(self, kind: TokenKind) -> int:
        return int(np.count_nonzero(self._kinds == kind))


# Functions ------------------------------------------------------------------------------------------------------------
def short_text(text: bytes, width: int = 10) -> str:
    """Renders residue text for messages, eliding the middle of long sequences."""
    s = text.decode('ascii', 'replace')
    if len(s) <= 2 * width: return s
    return f"{s[:width]}...{s[-width:]}({len(s)})"


def tokens_to_string(tokens: Iterable[Token]) -> str:
    return ';\n'.join(map(str, tokens))


def only_gaps(tokens: Iterable[Token]) -> bool:
    return all(isinstance(t, Gap) for t in tokens)
