"""
The merge pipeline: segmentation, splice template construction, template replay, rendering and
positional checking.
"""
from allelemerge.merge.segment import bounded
from allelemerge.merge.template import zip_align, TemplateError
from allelemerge.merge.replay import map_instr_to_alignments, split_at_boundary, ReplayError
from allelemerge.merge.render import align_reference, align_same, RenderState, RenderError
from allelemerge.merge.check import reference_positions_align, positions_align, misaligned_indices, PositionError
from allelemerge.merge.pipeline import (
    build_template, merge_reference, merge_allele, merge_alleles, merge, DonorIndex, MergeJob, MergeResult,
    MergeReport, MergeError
)

# Constants ------------------------------------------------------------------------------------------------------------
SUPPORTED_GENES = ('A', 'B', 'C')
