import pytest

from allelemerge.core.region import BoundaryMarker, FillFromGenomic, MergeCodingIntoGenomic
from allelemerge.merge import zip_align, TemplateError

SENTINEL_GEN = BoundaryMarker(-1, -1, 7)
SENTINEL_NUC = BoundaryMarker(-1, -1, 4)
BM1 = BoundaryMarker(0, 6, 4)
BM2 = BoundaryMarker(1, 10, 4)


class TestZipAlign:
    def test_single_exon(self):
        template = zip_align(
            gen=[(SENTINEL_GEN, b'AAACCC'), (BM1, b'GGG'), (BM2, b'TTT')],
            nuc=[(SENTINEL_NUC, b'GGG')]
        )
        assert [type(i) for i in template] == [FillFromGenomic, MergeCodingIntoGenomic, FillFromGenomic]
        fill, merge, tail = template
        assert fill.region.marker == SENTINEL_GEN
        assert merge.genomic.marker == BM1 and merge.coding.marker == SENTINEL_NUC
        assert merge.genomic.merged_start == 6
        assert merge.coding.merged_start == 6
        assert tail.region.merged_start == 10

    def test_offsets_place_regions_at_running_cursor(self, gapped_template):
        cursor = gapped_template[0].marker.position
        for instruction in gapped_template:
            if isinstance(instruction, MergeCodingIntoGenomic):
                assert instruction.genomic.merged_start == cursor
                assert instruction.coding.merged_start == cursor
                cursor = instruction.coding.merged_end
            else:
                assert instruction.region.merged_start == cursor
                cursor = instruction.region.merged_end
        assert cursor == 27

    def test_gapped_coding_shifts_following_genomic_regions(self, gapped_template):
        offsets = [i.region.offset if isinstance(i, FillFromGenomic) else (i.genomic.offset, i.coding.offset)
                   for i in gapped_template]
        assert offsets == [0, (0, 5), 2, (2, 11), 2]

    def test_text_payloads(self, template):
        merges = [i for i in template if isinstance(i, MergeCodingIntoGenomic)]
        assert [m.coding.payload for m in merges] == [b'ATGCC', b'TTGA']
        assert all(m.coding.payload == m.genomic.payload for m in merges)

    def test_near_miss_is_filled(self):
        template = zip_align(
            gen=[(SENTINEL_GEN, b'AAACCC'), (BM1, b'GGA'), (BM2, b'GGG')],
            nuc=[(SENTINEL_NUC, b'GGG')]
        )
        assert [type(i) for i in template] == [FillFromGenomic, FillFromGenomic, MergeCodingIntoGenomic]
        assert template[1].region.marker == BM1

    def test_one_base_difference_never_merges(self):
        with pytest.raises(TemplateError, match='end of genomic sequence'):
            zip_align(gen=[(SENTINEL_GEN, b'AAACCC'), (BM1, b'GGG'), (BM2, b'TTT')], nuc=[(SENTINEL_NUC, b'GGC')])

    def test_coding_beyond_genomic(self):
        with pytest.raises(TemplateError, match='GGG'):
            zip_align(gen=[(SENTINEL_GEN, b'AAA')], nuc=[(SENTINEL_NUC, b'GGG')])

    def test_empty_genomic(self):
        with pytest.raises(TemplateError, match='Empty'):
            zip_align(gen=[], nuc=[(SENTINEL_NUC, b'GGG')])

    def test_no_coding_fills_everything(self):
        template = zip_align(gen=[(SENTINEL_GEN, b'AAACCC'), (BM1, b'GGG')], nuc=[])
        assert all(isinstance(i, FillFromGenomic) for i in template)
        assert [i.region.offset for i in template] == [0, 0]
