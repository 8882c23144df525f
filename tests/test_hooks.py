"""Tests for hook classification and ranking."""

import pytest

from creatorlens.core import HookType, NoCandidatesGeneratedError, Platform, ValidationError
from creatorlens.scoring import HookGenerator


@pytest.fixture
def generator():
    return HookGenerator()


class TestClassify:

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Why does nobody talk about this?", HookType.QUESTION),
            ("Is 90% of advice wrong?", HookType.QUESTION),
            ("9 out of 10 creators skip this step.", HookType.STATISTIC),
            ("Half of you do this, about 50%.", HookType.STATISTIC),
            ("I tried cold brew and this happened.", HookType.STORY),
            ("Nobody tells you the truth about coffee.", HookType.CONTROVERSY),
            ("This is the simplest coffee setup.", HookType.STATEMENT),
        ],
    )
    def test_first_matching_rule_wins(self, generator, text, expected):
        assert generator.classify(text) == expected


class TestRank:

    def test_sorted_best_first(self, generator):
        hooks = generator.rank(
            ["A plain line.", "What is the secret to better coffee today?", "Try 3 proven tricks."],
            Platform.YOUTUBE,
            3,
        )
        scores = [hook.viral_score for hook in hooks]

        assert scores == sorted(scores, reverse=True)
        assert hooks[0].text == "What is the secret to better coffee today?"
        assert all(hook.platform == Platform.YOUTUBE for hook in hooks)

    def test_equal_scores_keep_input_order(self, generator):
        hooks = generator.rank(["First plain line.", "Second plain line."], "tiktok", 2)
        assert [hook.text for hook in hooks] == ["First plain line.", "Second plain line."]

    def test_duplicates_and_blanks_removed(self, generator):
        hooks = generator.rank(["Same hook.", "  same HOOK.  ", "", "   ", "Other hook?"], Platform.TIKTOK, 10)
        assert sorted(hook.text for hook in hooks) == ["Other hook?", "Same hook."]

    def test_truncated_to_count(self, generator):
        candidates = [f"Hook number {index}." for index in range(8)]
        assert len(generator.rank(candidates, Platform.INSTAGRAM, 3)) == 3

    def test_viral_score_is_hook_strength(self, generator):
        hook = generator.rank(["What if I told you this works?"], Platform.YOUTUBE, 1)[0]
        assert hook.viral_score == generator.rank(["What if I told you this works?"], Platform.TIKTOK, 1)[0].viral_score
        assert hook.viral_score >= 65

    def test_count_below_one_rejected(self, generator):
        with pytest.raises(ValidationError):
            generator.rank(["A hook."], Platform.YOUTUBE, 0)

    def test_no_usable_candidates(self, generator):
        with pytest.raises(NoCandidatesGeneratedError):
            generator.rank(["", "   "], Platform.YOUTUBE, 3)

    def test_generate_hooks_tags_error_with_topic(self, generator):
        with pytest.raises(NoCandidatesGeneratedError) as exc_info:
            generator.generate_hooks("espresso", Platform.YOUTUBE, 3, [])
        assert exc_info.value.topic == "espresso"
