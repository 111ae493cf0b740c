"""
Merging of a gene's genomic and coding alignments.

There are many more alleles with coding sequence than with genomic sequence, but genomic sequence
lets many more reads be matched. The coding sequences are therefore used as scaffolding into which
introns and UTRs from the genomic alignment are zipped:

1. The reference allele's two rows are used to build a splice template (``build_template``).
2. The template is replayed against the reference itself to produce the merged reference
   (``merge_reference``).
3. Every allele with both genomic and coding data is merged with its own rows.
4. Coding-only alleles are merged using the genomic row of their nearest allele (``DonorIndex``).
"""
from typing import Iterable, NamedTuple, Optional, Hashable, Sequence
from warnings import warn

from allelemerge import AlleleMergeError, MergeWarning
from allelemerge.core.token import Token
from allelemerge.core.region import Instruction
from allelemerge.containers.alignment import AlleleAlignment
from allelemerge.merge.segment import bounded
from allelemerge.merge.template import zip_align
from allelemerge.merge.replay import map_instr_to_alignments
from allelemerge.merge.render import align_reference, align_same
from allelemerge.merge.check import reference_positions_align
from allelemerge.utils.protocols import ResolutionLookup
from allelemerge.utils.resources import RESOURCES


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class MergeError(AlleleMergeError):
    """Raised when the two alignments of a gene cannot be merged as a whole."""


# Classes --------------------------------------------------------------------------------------------------------------
class MergeJob(NamedTuple):
    """One allele to merge: its name, the genomic row to fill from and its coding row."""
    name: str
    gen: Sequence[Token]
    nuc: Sequence[Token]
    donor: Optional[str] = None


class MergeResult(NamedTuple):
    """
    Outcome of merging one allele.

    Attributes:
        name: The allele.
        elements: The merged row, ``None`` on failure.
        error: The failure, ``None`` on success.
        donor: Name of the allele whose genomic row was used, ``None`` when it was the allele's own.
    """
    name: str
    elements: Optional[list[Token]] = None
    error: Optional[AlleleMergeError] = None
    donor: Optional[str] = None

    @property
    def ok(self) -> bool: return self.error is None


class MergeReport(NamedTuple):
    """
    Outcome of merging a gene.

    Attributes:
        alignment: The merged alignment; alternates only for successfully merged alleles.
        results: One result per attempted allele, in input order.
        donors: Allele name to the name of the allele its genomic row came from.
    """
    alignment: AlleleAlignment
    results: list[MergeResult]
    donors: dict[str, str]

    @property
    def failures(self) -> list[MergeResult]: return [r for r in self.results if not r.ok]


class DonorIndex:
    """
    Read-only map from allele resolution to genomic row, used to pick genomic donors.

    Name parsing and nearest-neighbour search are delegated to the injected lookup.

    Args:
        lookup: The nomenclature service.
        genomic: The genomic alignment whose rows can be donated.

    Examples:
        >>> index = DonorIndex(lookup, gen_alignment)
        >>> donor_name, donor_tokens = index.donor_for('A*01:01:38L')
    """
    __slots__ = ('_lookup', '_rows')

    def __init__(self, lookup: ResolutionLookup, genomic: AlleleAlignment):
        self._lookup = lookup
        self._rows: dict[Hashable, tuple[str, list[Token]]] = {}
        for name, tokens in genomic:
            try: key = lookup.resolve(name)
            except Exception as error:
                warn(f'Could not resolve genomic allele {name}, not used as a donor: {error}', MergeWarning)
                continue
            self._rows.setdefault(key, (name, tokens))

    def __len__(self) -> int: return len(self._rows)
    def __contains__(self, key: Hashable) -> bool: return key in self._rows

    def donor_for(self, name: str) -> tuple[str, list[Token]]:
        """
        Returns the name and genomic row of the allele nearest to ``name``.

        Raises:
            MergeError: If the lookup fails on ``name`` or answers with a resolution that has no genomic row.
        """
        try: key = self._lookup.nearest(self._lookup.resolve(name), self._rows.keys())
        except Exception as error: raise MergeError(f'Could not resolve {name}: {error}') from error
        if key not in self._rows: raise MergeError(f'No genomic sequence for nearest resolution {key!r} of {name}')
        return self._rows[key]


# Functions ------------------------------------------------------------------------------------------------------------
def build_template(gen: AlleleAlignment, nuc: AlleleAlignment) -> list[Instruction]:
    """
    Builds the splice template from the reference rows of both alignments.

    Raises:
        MergeError: If the alignments disagree on reference allele or alignment date.
        TemplateError: If the reference rows cannot be zipped.
    """
    if gen.reference != nuc.reference:
        raise MergeError(f"References don't match {gen.reference} vs {nuc.reference}")
    if gen.align_date != nuc.align_date:
        raise MergeError(f"Align dates don't match {gen.align_date} vs {nuc.align_date}")
    return zip_align(bounded(gen.ref_elems), bounded(nuc.ref_elems))


def merge_reference(template: Sequence[Instruction], gen: AlleleAlignment, nuc: AlleleAlignment) -> list[Token]:
    """
    Replays the template against the reference itself and renders the merged reference row.

    The row is rendered twice, through ``align_reference`` and ``align_same``, and both must agree.
    """
    instructions = map_instr_to_alignments(template, gen.ref_elems, nuc.ref_elems)
    merged = align_reference(instructions)
    reference_positions_align(merged, name=f'reference:{gen.reference}')
    if (again := align_same(gen.reference, instructions)) != merged:
        raise MergeError(f'Reference {gen.reference} does not render the same through align_same '
                         f'({len(again)} vs {len(merged)} tokens)')
    return merged


def merge_allele(template: Sequence[Instruction], name: str, gen: Sequence[Token], nuc: Sequence[Token]) -> list[Token]:
    """Merges one allele: replay, render and positional check."""
    merged = align_same(name, map_instr_to_alignments(template, gen, nuc))
    reference_positions_align(merged, name=name)
    return merged


def _run(template: Sequence[Instruction], job: MergeJob) -> MergeResult:
    try:
        return MergeResult(job.name, merge_allele(template, job.name, job.gen, job.nuc), donor=job.donor)
    except AlleleMergeError as error:
        warn(f'Could not merge {job.name}: {error}', MergeWarning)
        return MergeResult(job.name, error=error, donor=job.donor)


def merge_alleles(template: Sequence[Instruction], jobs: Iterable[MergeJob], parallel: bool = True) -> list[MergeResult]:
    """
    Merges many alleles against one template, isolating failures.

    Args:
        template: Output of ``build_template``; shared read-only between jobs.
        jobs: Alleles to merge.
        parallel: Run jobs on the shared thread pool.

    Returns:
        One result per job, in input order. Failures are also reported as ``MergeWarning``.
    """
    jobs = list(jobs)
    if parallel and len(jobs) > 1:
        return list(RESOURCES.pool.map(lambda job: _run(template, job), jobs))
    return [_run(template, job) for job in jobs]


def merge(gen: AlleleAlignment, nuc: AlleleAlignment, lookup: ResolutionLookup = None,
          parallel: bool = True) -> MergeReport:
    """
    Merges a gene's genomic and coding alignments into one alignment.

    Alleles present in both alignments are merged with their own genomic row. Coding-only alleles are
    merged with the genomic row of their nearest allele when ``lookup`` is given and reported as failed
    otherwise.

    Args:
        gen: The genomic (intron and exon) alignment.
        nuc: The coding (exon only) alignment.
        lookup: Nomenclature service used to pick genomic donors.
        parallel: Merge alleles concurrently.

    Returns:
        The merged alignment with per-allele results.

    Raises:
        MergeError, TemplateError, ReplayError, RenderError, PositionError: If the reference cannot be
            merged; failures of individual alleles are reported in the results instead.
    """
    template = build_template(gen, nuc)
    ref_elems = merge_reference(template, gen, nuc)
    index = DonorIndex(lookup, gen) if lookup is not None else None
    jobs, unmatched, donors = [], {}, {}
    for name, nuc_tokens in nuc.alt_elems.items():
        if name in gen.alt_elems:
            jobs.append(MergeJob(name, gen.alt_elems[name], nuc_tokens))
            donors[name] = name
        elif index is not None:
            try: donor, gen_tokens = index.donor_for(name)
            except AlleleMergeError as error:
                warn(f'Could not find a genomic donor for {name}: {error}', MergeWarning)
                unmatched[name] = MergeResult(name, error=error)
                continue
            jobs.append(MergeJob(name, gen_tokens, nuc_tokens, donor))
            donors[name] = donor
        else:
            error = MergeError(f'No genomic row for {name} and no lookup to pick a donor')
            warn(f'Could not merge {name}: {error}', MergeWarning)
            unmatched[name] = MergeResult(name, error=error)
    merged_results = {r.name: r for r in merge_alleles(template, jobs, parallel=parallel)}
    results = [merged_results.get(name) or unmatched[name] for name in nuc.alt_elems]
    merged = AlleleAlignment(gen.reference, gen.align_date, ref_elems,
                             {r.name: r.elements for r in results if r.ok})
    return MergeReport(merged, results, donors)
