import pytest

from allelemerge.core.token import Boundary, Start, End, Gap, Sequence
from allelemerge.core.region import FillFromGenomic, MergeCodingIntoGenomic
from allelemerge.merge import map_instr_to_alignments, split_at_boundary, ReplayError


class TestSplitAtBoundary:
    def test_drops_boundary_and_shifts_prefix(self, gen):
        before, after = split_at_boundary(gen, 10, offset=2)
        assert before == [Start(2), Sequence(2, b'AAAA'), Boundary(0, 6), Sequence(7, b'ATGCC')]
        assert after[0] == Sequence(11, b'GTAAG')

    def test_no_boundary_takes_everything(self, nuc):
        before, after = split_at_boundary(nuc, 99)
        assert before == nuc
        assert not after


class TestMapInstrToAlignments:
    def test_reference_replay(self, template, gen, nuc):
        instructions = map_instr_to_alignments(template, gen, nuc)
        assert len(instructions) == len(template)
        fill, exon1, intron, exon2, utr = instructions
        assert fill.region.payload == [Start(0), Sequence(0, b'AAAA')]
        assert exon1.genomic.payload == [Sequence(5, b'ATGCC')]
        assert exon1.coding.payload == [Start(5), Sequence(5, b'ATGCC')]
        assert intron.region.payload == [Sequence(11, b'GTAAG')]
        assert exon2.coding.payload == [Sequence(17, b'TTGA'), End(21)]
        assert utr.region.payload == [Sequence(22, b'CCC'), End(25)]

    def test_replay_keeps_template_markers(self, template, gen, nuc):
        for replayed, original in zip(map_instr_to_alignments(template, gen, nuc), template):
            assert type(replayed) is type(original)
            assert replayed.marker == original.marker

    def test_gapped_coding_is_shifted(self, gapped_template, gen, gapped_nuc):
        instructions = map_instr_to_alignments(gapped_template, gen, gapped_nuc)
        assert instructions[1].coding.payload == [Start(5), Sequence(5, b'ATG'), Gap(8, 2), Sequence(10, b'CC')]
        assert instructions[2].region.payload == [Sequence(13, b'GTAAG')]
        assert instructions[3].coding.payload == [Sequence(19, b'TTGA'), End(23)]

    def test_leftover_genomic(self, template, gen, nuc):
        longer = gen[:-1] + [Boundary(4, 25), Sequence(26, b'GG'), End(28)]
        with pytest.raises(ReplayError, match='genomic not empty'):
            map_instr_to_alignments(template, longer, nuc)
        instructions = map_instr_to_alignments(template, longer, nuc, fail_on_empty=False)
        assert instructions[-1].region.payload == [Sequence(22, b'CCC')]

    def test_leftover_coding(self, template, gen, nuc):
        longer = nuc[:-1] + [Boundary(1, 10), Sequence(11, b'AA'), End(13)]
        with pytest.raises(ReplayError, match='coding sequence not empty'):
            map_instr_to_alignments(template, gen, longer)
        instructions = map_instr_to_alignments(template, gen, longer, fail_on_empty=False)
        assert instructions[3].coding.payload == [Sequence(17, b'TTGA')]
        assert instructions[-1].region.payload == [Sequence(22, b'CCC'), End(25)]

    def test_must_start_with_sentinel_fill(self, template, gen, nuc):
        with pytest.raises(ReplayError, match='starting'):
            map_instr_to_alignments(template[1:], gen, nuc)
        with pytest.raises(ReplayError, match='Empty'):
            map_instr_to_alignments([], gen, nuc)

    def test_payload_types(self, template, gen, nuc):
        instructions = map_instr_to_alignments(template, gen, nuc)
        assert isinstance(instructions[0], FillFromGenomic)
        assert isinstance(instructions[1], MergeCodingIntoGenomic)
        assert all(isinstance(i.marker.position, int) for i in instructions)
