"""Tests for quota distribution across chunks."""

from examgen.chunking import Chunk, distribute_across_chunks
from examgen.generation import BloomCounts, DifficultyCounts, GenerationRequest


def _chunks(*token_counts: int) -> list[Chunk]:
    return [
        Chunk(
            id=f"chunk-{index}",
            title=f"Section {index}",
            content="x" * tokens * 4,
            start_line=index,
            end_line=index,
            tokens=tokens,
        )
        for index, tokens in enumerate(token_counts, start=1)
    ]


def _column(allocations, axis, counter):
    return [allocation.quotas[axis][counter] for allocation in allocations]


class TestDistributeAcrossChunks:
    """Test proportional distribution of quotas."""

    def test_equal_chunks_split_evenly(self):
        """Test 6/6/6 over three equal chunks gives 2/2/2 each."""
        requirements = {"question_counts": {"easy": 6, "medium": 6, "hard": 6}}

        allocations = distribute_across_chunks(_chunks(500, 500, 500), requirements)

        assert len(allocations) == 3
        for allocation in allocations:
            assert allocation.quotas["question_counts"] == {"easy": 2, "medium": 2, "hard": 2}
            assert allocation.total("question_counts") == 6

    def test_sums_are_exact_and_non_negative(self):
        """Test every counter sums to its request on uneven chunks."""
        request = GenerationRequest(
            material_content="material",
            course_name="Networks",
            material_name="Unit 1",
            question_counts=DifficultyCounts(easy=7, medium=3, hard=5),
            bloom_levels=BloomCounts(remember=4, understand=3, apply=2, analyze=1, evaluate=5),
        )
        requirements = request.quota_axes()

        allocations = distribute_across_chunks(_chunks(100, 250, 650, 7), requirements)

        for axis, counters in requirements.items():
            for counter, total in counters.items():
                column = _column(allocations, axis, counter)
                assert sum(column) == total
                assert all(value >= 0 for value in column)

    def test_axes_are_independent(self):
        """Test each axis is distributed on its own."""
        requirements = {
            "question_counts": {"easy": 4},
            "question_types": {"direct": 1, "scenario_based": 3},
        }

        allocations = distribute_across_chunks(_chunks(300, 100), requirements)

        assert _column(allocations, "question_counts", "easy") == [3, 1]
        assert _column(allocations, "question_types", "direct") == [1, 0]
        assert _column(allocations, "question_types", "scenario_based") == [2, 1]

    def test_rounding_overshoot_is_settled(self):
        """Test rounding up on earlier chunks never leaves a negative remainder."""
        requirements = {"question_counts": {"easy": 5}}

        allocations = distribute_across_chunks(_chunks(30, 30, 30, 10), requirements)

        column = _column(allocations, "question_counts", "easy")
        assert column == [2, 2, 1, 0]
        assert sum(column) == 5

    def test_zero_token_chunks_weighted_equally(self):
        """Test chunks without tokens share quotas equally."""
        requirements = {"question_counts": {"hard": 4}}

        allocations = distribute_across_chunks(_chunks(0, 0), requirements)

        assert _column(allocations, "question_counts", "hard") == [2, 2]

    def test_zero_requests_stay_zero(self):
        """Test zero counters are allocated as zero everywhere."""
        allocations = distribute_across_chunks(
            _chunks(10, 20), {"question_counts": {"easy": 0}}
        )

        assert _column(allocations, "question_counts", "easy") == [0, 0]

    def test_chunk_ids_preserved(self):
        """Test allocations come back in chunk order."""
        allocations = distribute_across_chunks(_chunks(1, 2, 3), {"question_counts": {"easy": 1}})

        assert [allocation.chunk_id for allocation in allocations] == [
            "chunk-1",
            "chunk-2",
            "chunk-3",
        ]

    def test_no_chunks(self):
        """Test an empty chunk list yields no allocations."""
        assert distribute_across_chunks([], {"question_counts": {"easy": 3}}) == []
