"""Unit tests for mememachine.search.aggregate — scoring and near-duplicate suppression."""
import pytest

from mememachine.config import MIN_GAP_MS
from mememachine.models import Frame, ScoredFrame
from mememachine.search.aggregate import (
    aggregate_results,
    score_frames,
    suppress_near_duplicates,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_frames(count: int, episode: str = "S05E01", spacing_ms: int = 40_000) -> list[Frame]:
    """Create *count* frames from one episode, *spacing_ms* apart."""
    return [Frame(episode=episode, timestamp=i * spacing_ms) for i in range(count)]


# ---------------------------------------------------------------------------
# score_frames tests
# ---------------------------------------------------------------------------

class TestScoreFrames:
    def test_single_list_rank_bonus(self):
        """Rank 0 of 4 scores 2.0; rank 3 of 4 scores 1.25."""
        a, b, c, d = make_frames(4)
        scored = score_frames([[a, b, c, d]])
        assert [s.score for s in scored] == pytest.approx([2.0, 1.75, 1.5, 1.25])

    def test_scores_add_across_lists(self):
        a, b = make_frames(2)
        scored = score_frames([[a, b], [a]])
        by_key = {s.frame.key: s.score for s in scored}
        assert by_key[a.key] == pytest.approx(4.0)
        assert by_key[b.key] == pytest.approx(1.5)

    def test_duplicate_in_same_list_counted_once(self):
        """Second mention inside one list adds nothing; list length still counts it."""
        a, b = make_frames(2)
        scored = score_frames([[a, a, b]])
        by_key = {s.frame.key: s.score for s in scored}
        assert by_key[a.key] == pytest.approx(2.0)
        assert by_key[b.key] == pytest.approx(1.0 + (1.0 - 2 / 3))

    def test_equal_copies_merge_by_key(self):
        """Two Frame objects with the same episode and timestamp share one score."""
        scored = score_frames([[Frame("S01E01", 500)], [Frame("S01E01", 500)]])
        assert len(scored) == 1
        assert scored[0].score == pytest.approx(4.0)

    def test_first_list_supplies_canonical_frame(self):
        first = Frame("S01E01", 500)
        later = Frame("S01E01", 500)
        scored = score_frames([[first], [later]])
        assert scored[0].frame is first

    def test_ties_keep_first_seen_order(self):
        a, b, c = make_frames(3)
        scored = score_frames([[b], [a], [c]])
        assert [s.frame for s in scored] == [b, a, c]
        assert [s.order for s in scored] == [0, 1, 2]

    @pytest.mark.parametrize("junk", [None, "not a list", {"Episode": "S01E01"}, 42])
    def test_non_list_entries_contribute_nothing(self, junk):
        a = make_frames(1)[0]
        scored = score_frames([junk, [a]])
        assert [s.frame for s in scored] == [a]
        assert scored[0].score == pytest.approx(2.0)

    def test_non_frame_items_are_skipped(self):
        a = make_frames(1)[0]
        scored = score_frames([[{"Episode": "S01E01", "Timestamp": 1}, a]])
        assert [s.frame for s in scored] == [a]
        # a sits at rank 1 of 2
        assert scored[0].score == pytest.approx(1.5)

    def test_empty_input(self):
        assert score_frames([]) == []
        assert score_frames([[], []]) == []


# ---------------------------------------------------------------------------
# suppress_near_duplicates tests
# ---------------------------------------------------------------------------

class TestSuppressNearDuplicates:
    def _scored(self, frames: list[Frame]) -> list[ScoredFrame]:
        return [ScoredFrame(frame=f, score=10.0 - i, order=i) for i, f in enumerate(frames)]

    def test_close_frame_in_same_episode_dropped(self):
        best = Frame("S03E10", 100_000)
        near = Frame("S03E10", 110_000)
        assert suppress_near_duplicates(self._scored([best, near])) == [best]

    def test_same_timestamp_other_episode_kept(self):
        a = Frame("S03E10", 100_000)
        b = Frame("S04E02", 100_000)
        assert suppress_near_duplicates(self._scored([a, b])) == [a, b]

    def test_exact_gap_is_allowed(self):
        a = Frame("S03E10", 0)
        b = Frame("S03E10", MIN_GAP_MS)
        assert suppress_near_duplicates(self._scored([a, b])) == [a, b]

    def test_gap_checked_against_every_kept_frame(self):
        """Third frame is far from the first but too close to the second."""
        frames = [Frame("S03E10", 0), Frame("S03E10", 60_000), Frame("S03E10", 70_000)]
        assert suppress_near_duplicates(self._scored(frames)) == frames[:2]

    def test_suppressed_frame_does_not_block_later_ones(self):
        frames = [Frame("S03E10", 0), Frame("S03E10", 20_000), Frame("S03E10", 45_000)]
        assert suppress_near_duplicates(self._scored(frames)) == [frames[0], frames[2]]

    def test_stops_at_max_frames(self):
        frames = make_frames(10)
        assert suppress_near_duplicates(self._scored(frames), max_frames=3) == frames[:3]


# ---------------------------------------------------------------------------
# aggregate_results tests
# ---------------------------------------------------------------------------

class TestAggregateResults:
    def test_agreeing_queries_lead(self):
        """[[A,B,C],[B,D],[A]]: A=4.0, B≈3.67, D=1.5, C≈1.33."""
        a, b, c, d = make_frames(4)
        result = aggregate_results([[a, b, c], [b, d], [a]], 12)
        assert result == [a, b, d, c]

    def test_frame_in_more_lists_ranks_higher(self):
        x, y = make_frames(2)
        result = aggregate_results([[y, x], [x], [x]], 12)
        assert result[0] == x

    def test_better_rank_ranks_higher(self):
        x, y, filler = make_frames(3)
        result = aggregate_results([[x, filler], [filler, y]], 12)
        assert result.index(x) < result.index(y)

    def test_length_bounded_by_max_and_distinct_keys(self):
        frames = make_frames(6)
        lists = [frames[:4], frames[2:], frames[::2]]
        assert len(aggregate_results(lists, 3)) == 3
        assert len(aggregate_results(lists, 50)) == 6

    def test_no_two_results_within_gap(self):
        lists = [
            [Frame("S02E05", t) for t in range(0, 200_000, 5_000)],
            [Frame("S02E05", t) for t in range(2_500, 200_000, 10_000)],
            [Frame("S06E14", t) for t in range(0, 100_000, 7_000)],
        ]
        result = aggregate_results(lists, 50)
        for i, first in enumerate(result):
            for second in result[i + 1:]:
                if first.episode == second.episode:
                    assert abs(first.timestamp - second.timestamp) >= MIN_GAP_MS

    def test_all_queries_failed(self):
        assert aggregate_results([None, None], 12) == []

    def test_near_duplicate_of_top_frame_removed(self):
        top = Frame("S08E08", 300_000)
        dup = Frame("S08E08", 302_000)
        other = Frame("S08E08", 400_000)
        result = aggregate_results([[top, dup, other], [top]], 12)
        assert result == [top, other]
