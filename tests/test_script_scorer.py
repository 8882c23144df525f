"""Tests for heuristic script scoring."""

import pytest

from creatorlens.core import Impact, ImprovementCategory, Platform, mean_score
from creatorlens.scoring import ScriptScorer


@pytest.fixture
def scorer():
    return ScriptScorer()


def _words(count):
    return " ".join(["word"] * count) + "."


class TestHookStrength:

    def test_question_hook_scores_at_least_65(self, scorer):
        assert scorer.hook_strength("What if I told you this works?") >= 65

    def test_only_first_sentence_counts(self, scorer):
        assert scorer.hook_strength("A calm start. Is this the secret?") == 50

    def test_digits_and_power_words_add_points(self, scorer):
        plain = scorer.hook_strength("Here is a tip.")
        boosted = scorer.hook_strength("Here are 3 proven tips.")
        assert boosted == plain + 10 + 5

    def test_matches_whole_words_only(self, scorer):
        assert scorer.hook_strength("Nowhere to go.") == 50
        assert scorer.hook_strength("Start NOW.") == 55

    def test_clamped_to_100(self, scorer):
        hook = "The secret amazing shocking incredible ultimate proven guaranteed deal, now today, 100 percent?"
        assert scorer.hook_strength(hook) == 100


class TestSubScores:

    def test_engagement_caps_questions(self, scorer):
        assert scorer.engagement_potential("Why? " * 10) == 70

    def test_engagement_caps_each_pronoun(self, scorer):
        text = " ".join(["you"] * 30)
        assert scorer.engagement_potential(text) == 60

    def test_clarity_penalizes_long_sentences(self, scorer):
        assert scorer.clarity(_words(10)) == 100
        assert scorer.clarity(_words(25)) == 80
        assert scorer.clarity(_words(35)) == 60

    def test_clarity_penalizes_long_words(self, scorer):
        text = "Extraordinarily complicated instrumentation. Short words here."
        assert scorer.clarity(text) == 85

    def test_clarity_of_empty_text_is_base(self, scorer):
        assert scorer.clarity("") == 100

    def test_emotion_counts_distinct_words(self, scorer):
        assert scorer.emotional_impact("An amazing story.") == 43
        assert scorer.emotional_impact("Amazing amazing amazing story story.") == 43

    def test_call_to_action_counts_distinct_verbs(self, scorer):
        assert scorer.call_to_action_strength("Subscribe and like, then try it.") == 45
        assert scorer.call_to_action_strength("Subscribe subscribe subscribe.") == 30

    def test_scores_stay_in_range(self, scorer):
        text = ("Subscribe like comment share follow click visit download try start begin join. " * 5)
        breakdown = scorer.analyze(text)
        for value in breakdown.sub_scores + [breakdown.overall]:
            assert 0 <= value <= 100


class TestAnalyze:

    def test_overall_is_rounded_mean(self, scorer):
        breakdown = scorer.analyze("What if I told you this works? Subscribe for more!", Platform.TIKTOK)
        assert breakdown.overall == mean_score(breakdown.sub_scores)

    def test_scoring_is_idempotent(self, scorer):
        text = "I tried cold brew for a week. You won't believe what happened. Follow for more."
        assert scorer.analyze(text, "tiktok") == scorer.analyze(text, "tiktok")

    def test_adding_question_never_lowers_scores(self, scorer):
        base = scorer.analyze("This changes everything. Try it.")
        more = scorer.analyze("Does this change everything? Try it.")

        assert more.hook_strength >= base.hook_strength
        assert more.engagement_potential >= base.engagement_potential

    def test_adding_power_word_never_lowers_hook(self, scorer):
        assert scorer.hook_strength("The secret method works.") >= scorer.hook_strength("The method works.")

    def test_length_fit_against_platform_band(self, scorer):
        short = scorer.analyze(_words(10), Platform.TIKTOK)
        assert short.length_fit.within_band is False
        assert short.length_fit.recommended_length == 100

        fitting = scorer.analyze(_words(80), Platform.TIKTOK)
        assert fitting.length_fit.within_band is True
        assert fitting.length_fit.current_length == 80

    def test_weak_plain_script_gets_improvements(self, scorer):
        breakdown = scorer.analyze("This is a plain sentence.", Platform.TIKTOK)
        by_category = {item.category: item for item in breakdown.improvements}

        assert by_category[ImprovementCategory.HOOK].impact == Impact.HIGH
        assert by_category[ImprovementCategory.ENGAGEMENT].impact == Impact.HIGH
        assert by_category[ImprovementCategory.CTA].impact == Impact.MEDIUM
        assert ImprovementCategory.CLARITY not in by_category
        length = by_category[ImprovementCategory.LENGTH]
        assert length.impact == Impact.LOW
        assert length.suggestion.startswith("Expand to about 100 words")

    def test_too_long_script_is_told_to_shorten(self, scorer):
        breakdown = scorer.analyze(_words(200), Platform.TIKTOK)
        length = [item for item in breakdown.improvements if item.category == ImprovementCategory.LENGTH]
        assert length[0].suggestion.startswith("Shorten")

    def test_needs_call_to_action(self, scorer):
        assert scorer.needs_call_to_action("Just a thought.") is True
        assert scorer.needs_call_to_action("Subscribe, like and share!") is False
