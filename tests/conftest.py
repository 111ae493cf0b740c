"""
Shared alignment rows for a small two-exon gene::

    5'UTR | exon 1 | intron 1 | exon 2 | 3'UTR
    AAAA  | ATGCC  | GTAAG    | TTGA   | CCC

Boundaries occupy one column each, so the genomic reference spans columns 0..25.
"""
import pytest

from allelemerge.core.token import Boundary, Start, End, Gap, Sequence
from allelemerge.containers.alignment import AlleleAlignment
from allelemerge.merge import bounded, zip_align

REFERENCE = 'A*01:01:01:01'
DATE = '2017-01-19'


def genomic_row():
    return [Start(0), Sequence(0, b'AAAA'), Boundary(0, 4), Sequence(5, b'ATGCC'), Boundary(1, 10),
            Sequence(11, b'GTAAG'), Boundary(2, 16), Sequence(17, b'TTGA'), Boundary(3, 21), Sequence(22, b'CCC'),
            End(25)]


def coding_row():
    return [Start(0), Sequence(0, b'ATGCC'), Boundary(0, 5), Sequence(6, b'TTGA'), End(10)]


def gapped_coding_row():
    """Coding row whose alignment has two extra gap columns inside exon 1."""
    return [Start(0), Sequence(0, b'ATG'), Gap(3, 2), Sequence(5, b'CC'), Boundary(0, 7), Sequence(8, b'TTGA'),
            End(12)]


@pytest.fixture
def gen():
    return genomic_row()


@pytest.fixture
def nuc():
    return coding_row()


@pytest.fixture
def gapped_nuc():
    return gapped_coding_row()


@pytest.fixture
def template():
    return zip_align(bounded(genomic_row()), bounded(coding_row()))


@pytest.fixture
def gapped_template():
    return zip_align(bounded(genomic_row()), bounded(gapped_coding_row()))


@pytest.fixture
def alignments():
    """Genomic and coding alignments with alternates covering the common missing-data cases."""
    gen = AlleleAlignment(REFERENCE, DATE, genomic_row(), {
        'A*01:02': genomic_row(),
        'A*02:01:01:01': genomic_row(),
        'A*03:01:01:01': genomic_row(),
    })
    nuc = AlleleAlignment(REFERENCE, DATE, coding_row(), {
        'A*01:02': coding_row(),
        # Exon 1 unknown
        'A*02:01:01:01': [Gap(0, 5), Boundary(0, 5), Start(6), Sequence(6, b'TTGA'), End(10)],
        # Residues after the end of the data
        'A*03:01:01:01': [Start(0), Sequence(0, b'ATGCC'), Boundary(0, 5), Sequence(6, b'TT'), End(8),
                          Sequence(8, b'GA')],
        # Coding only, needs a genomic donor
        'A*01:01:38L': coding_row(),
    })
    return gen, nuc


class FieldLookup:
    """Resolves 'A*01:02:03' to ('01', '02', '03'); the nearest key shares the longest field prefix."""
    def resolve(self, name):
        return tuple(name.split('*', 1)[1].split(':'))

    def nearest(self, key, known):
        def shared(other):
            n = 0
            for a, b in zip(key, other):
                if a != b: break
                n += 1
            return n
        return max(known, key=shared)


@pytest.fixture
def lookup():
    return FieldLookup()
