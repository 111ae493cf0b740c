"""Container for a parsed (or merged) multiple sequence alignment of one gene."""
from typing import Iterator

from allelemerge.core.token import Token, TokenBatch


# Classes --------------------------------------------------------------------------------------------------------------
class AlleleAlignment:
    """
    One gene's alignment: the reference row plus every alternate allele row, as token lists.

    This is the shape produced by the alignment-file parser for both the genomic and the coding
    alignment, and the shape of the merged result.

    Args:
        reference: Name of the reference allele.
        align_date: Alignment release date as reported by the source file.
        ref_elems: The reference allele's tokens.
        alt_elems: Alternate allele name to tokens, in file order.

    Examples:
        >>> aln = AlleleAlignment('A*01:01:01:01', '2017-01-01', ref_tokens, {'A*01:02': alt_tokens})
        >>> 'A*01:02' in aln
        True
    """
    __slots__ = ('reference', 'align_date', 'ref_elems', 'alt_elems')

    def __init__(self, reference: str, align_date: str, ref_elems: list[Token],
                 alt_elems: dict[str, list[Token]] = None):
        self.reference = reference
        self.align_date = align_date
        self.ref_elems = list(ref_elems)
        self.alt_elems = dict(alt_elems) if alt_elems else {}

    def __repr__(self):
        return f"AlleleAlignment({self.reference}, {self.align_date}, {len(self.alt_elems)} alternates)"

    def __len__(self) -> int: return 1 + len(self.alt_elems)
    def __contains__(self, name: str) -> bool: return name == self.reference or name in self.alt_elems

    def __getitem__(self, name: str) -> list[Token]:
        if name == self.reference: return self.ref_elems
        return self.alt_elems[name]

    def __iter__(self) -> Iterator[tuple[str, list[Token]]]:
        yield self.reference, self.ref_elems
        yield from self.alt_elems.items()

    @property
    def names(self) -> list[str]: return [self.reference, *self.alt_elems]

    def batch(self, name: str = None) -> TokenBatch:
        """Columnar view of one row (the reference by default)."""
        return TokenBatch.build(self[name or self.reference])
