from allelemerge.core.token import Boundary, Start, End, Gap, Sequence, TokenBatch, TokenKind
from allelemerge.core.region import BoundaryMarker
from allelemerge.merge import bounded


class TestBounded:
    def test_reference_row(self, gen):
        segments = bounded(gen)
        assert segments == [
            (BoundaryMarker(-1, -1, 5), b'AAAA'),
            (BoundaryMarker(0, 4, 6), b'ATGCC'),
            (BoundaryMarker(1, 10, 6), b'GTAAG'),
            (BoundaryMarker(2, 16, 5), b'TTGA'),
            (BoundaryMarker(3, 21, 4), b'CCC'),
        ]

    def test_markers_chain_to_next_boundary(self, gen):
        segments = bounded(gen)
        for (marker, _), (following, _) in zip(segments, segments[1:]):
            assert marker.end == following.position

    def test_segment_count_and_lengths_cover_span(self, gen):
        batch = TokenBatch.build(gen)
        n = batch.count(TokenKind.BOUNDARY)
        segments = bounded(gen)
        assert len(segments) == n + 1
        # Each segment also counts its opening boundary column, plus the one closing the last segment
        assert sum(m.length for m, _ in segments) == batch.span + 1

    def test_gaps_extend_length_without_text(self, gapped_nuc):
        segments = bounded(gapped_nuc)
        assert segments[0] == (BoundaryMarker(-1, -1, 8), b'ATGCC')
        assert segments[1] == (BoundaryMarker(0, 7, 5), b'TTGA')

    def test_start_mid_segment_moves_sentinel(self):
        segments = bounded([Start(3), Sequence(3, b'AC'), Boundary(0, 5), Sequence(6, b'T'), End(7)])
        assert segments[0] == (BoundaryMarker(-1, 2, 3), b'AC')
        assert segments[0][0].end == 5

    def test_start_after_first_boundary_is_ignored(self):
        segments = bounded([Boundary(0, 0), Gap(1, 2), Start(3), Sequence(3, b'GG')])
        assert segments[0] == (BoundaryMarker(-1, -1, 1), b'')
        assert segments[1] == (BoundaryMarker(0, 0, 5), b'GG')

    def test_empty(self):
        assert bounded([]) == [(BoundaryMarker(-1, -1, 1), b'')]
