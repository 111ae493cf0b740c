"""Construction of the splice template from the reference allele's genomic and coding segments."""
from typing import Sequence

from allelemerge import AlleleMergeError
from allelemerge.core.region import BoundaryMarker, Region, FillFromGenomic, MergeCodingIntoGenomic, Instruction
from allelemerge.merge.segment import bounded_to_string


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class TemplateError(AlleleMergeError):
    """Raised when the reference's genomic and coding segments cannot be zipped together."""


# Functions ------------------------------------------------------------------------------------------------------------
def zip_align(gen: Sequence[tuple[BoundaryMarker, bytes]],
              nuc: Sequence[tuple[BoundaryMarker, bytes]]) -> list[Instruction]:
    """
    Zips coding segments into the genomic segments they came from.

    A genomic segment whose text equals the next unconsumed coding segment is an exon present in both
    alignments and becomes a ``MergeCodingIntoGenomic``; every other genomic segment (intron, UTR) is
    a ``FillFromGenomic``. Offsets place each region at the running merged-space cursor, which starts at
    the first genomic marker and advances by the coding length for merges and the genomic length for
    fills.

    Args:
        gen: ``bounded`` output of the reference's genomic row.
        nuc: ``bounded`` output of the reference's coding row.

    Returns:
        The template, with text payloads.

    Raises:
        TemplateError: If ``gen`` is empty or runs out before every coding segment was placed.
    """
    if not gen: raise TemplateError('Empty genomic sequence')
    template = []
    cursor = gen[0][0].position
    g = n = 0
    while n < len(nuc):
        if g == len(gen):
            raise TemplateError(f'Reached end of genomic sequence before coding: {bounded_to_string(nuc[n:])}')
        genomic, gen_text = gen[g]
        coding, nuc_text = nuc[n]
        if gen_text == nuc_text:
            template.append(MergeCodingIntoGenomic(
                coding=Region(coding, cursor - coding.position, nuc_text),
                genomic=Region(genomic, cursor - genomic.position, gen_text)
            ))
            cursor += coding.length
            n += 1
        else:
            template.append(FillFromGenomic(Region(genomic, cursor - genomic.position, gen_text)))
            cursor += genomic.length
        g += 1
    for genomic, gen_text in gen[g:]:
        template.append(FillFromGenomic(Region(genomic, cursor - genomic.position, gen_text)))
        cursor += genomic.length
    return template
