"""Tests for brand alignment scoring and rewriting."""

import pytest

from creatorlens.core import BrandGuidelines, BrandSample, Impact, IssueCategory, ValidationError, mean_score
from creatorlens.scoring import BrandAlignmentScorer


@pytest.fixture
def brand_scorer():
    return BrandAlignmentScorer()


class TestCheckAlignment:

    def test_avoided_word_raises_single_voice_issue(self, brand_scorer, guidelines):
        content = "Our cheap espresso machine makes great coffee at home."

        result = brand_scorer.check_alignment(content, guidelines)

        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.category == IssueCategory.VOICE
        assert issue.severity == Impact.MEDIUM
        assert '"cheap"' in issue.description
        assert issue.suggested_fix == 'Replace "cheap" with "affordable"'

    def test_category_scores(self, brand_scorer, guidelines):
        content = "Our cheap espresso machine makes great coffee at home."

        result = brand_scorer.check_alignment(content, guidelines)

        assert result.voice == 40.0
        assert result.messaging == 60.0
        assert result.guidelines == 58.0
        assert result.overall == mean_score([result.voice, result.messaging, result.guidelines])

    def test_avoided_word_matching_is_case_insensitive_and_whole_word(self, brand_scorer, guidelines):
        assert brand_scorer.check_alignment("CHEAP thrills, great coffee at home", guidelines).voice == 40.0
        assert brand_scorer.check_alignment("Cheaper beans, great coffee at home", guidelines).voice == 50.0

    def test_missing_key_message_is_reported(self, brand_scorer, guidelines):
        result = brand_scorer.check_alignment("A fresh espresso every morning.", guidelines)

        messaging = [issue for issue in result.issues if issue.category == IssueCategory.MESSAGING]
        assert len(messaging) == 1
        assert messaging[0].severity == Impact.MEDIUM

    def test_forbidden_topic_is_high_severity(self, brand_scorer, guidelines):
        result = brand_scorer.check_alignment("Great coffee at home, no politics.", guidelines)

        forbidden = [issue for issue in result.issues if issue.category == IssueCategory.GUIDELINES]
        assert len(forbidden) == 1
        assert forbidden[0].severity == Impact.HIGH
        assert result.guidelines == 35.0

    def test_title_is_checked_with_content(self, brand_scorer, guidelines):
        result = brand_scorer.check_alignment("Great coffee at home.", guidelines, title="Coffee and politics")
        assert any(issue.category == IssueCategory.GUIDELINES for issue in result.issues)

    def test_empty_guidelines_score_base_values(self, brand_scorer):
        result = brand_scorer.check_alignment("Anything at all.", BrandGuidelines())

        assert result.issues == []
        assert (result.voice, result.messaging, result.guidelines, result.overall) == (50.0, 50.0, 50.0, 50)

    def test_rewrite_only_on_request(self, brand_scorer, guidelines):
        assert brand_scorer.check_alignment("cheap beans", guidelines).rewrite is None
        assert brand_scorer.check_alignment("cheap beans", guidelines, include_rewrite=True).rewrite is not None


class TestRewrite:

    def test_replaces_avoided_words_with_first_preferred(self, brand_scorer, guidelines):
        rewrite = brand_scorer.rewrite("Cheap beans, cheap grinder. Great coffee at home.", guidelines)

        assert rewrite.text == "affordable beans, affordable grinder. Great coffee at home."
        assert rewrite.changes == ['Replaced "cheap" with "affordable"']

    def test_appends_key_message_when_missing(self, brand_scorer, guidelines):
        rewrite = brand_scorer.rewrite("Fresh espresso.", guidelines)

        assert rewrite.text == "Fresh espresso.\n\ngreat coffee at home"
        assert "Added key brand message" in rewrite.changes

    def test_key_message_append_can_be_disabled(self, brand_scorer, guidelines):
        rewrite = brand_scorer.rewrite("Fresh espresso.", guidelines, append_key_message=False)
        assert rewrite.text == "Fresh espresso."
        assert rewrite.changes == []

    def test_rewrite_clears_voice_issue(self, brand_scorer, guidelines):
        rewritten = brand_scorer.rewrite("Our cheap espresso.", guidelines).text
        result = brand_scorer.check_alignment(rewritten, guidelines)
        assert not any(issue.category == IssueCategory.VOICE for issue in result.issues)


class TestCheckConsistency:

    ON_BRAND = "Our cheap espresso machine makes great coffee at home."
    OFF_BRAND = "Politics aside, cheap gear is fine."

    def test_category_scores_are_averaged(self, brand_scorer, guidelines):
        first = brand_scorer.check_alignment(self.ON_BRAND, guidelines)
        second = brand_scorer.check_alignment(self.OFF_BRAND, guidelines)

        result = brand_scorer.check_consistency([self.ON_BRAND, self.OFF_BRAND], guidelines)

        assert result.sample_count == 2
        assert result.voice.score == round((first.voice + second.voice) / 2, 2)
        assert result.messaging.score == round((first.messaging + second.messaging) / 2, 2)
        assert result.guidelines.score == round((first.guidelines + second.guidelines) / 2, 2)
        assert result.overall == mean_score([result.voice.score, result.messaging.score, result.guidelines.score])

    def test_issues_grouped_and_deduplicated(self, brand_scorer, guidelines):
        result = brand_scorer.check_consistency([self.ON_BRAND, self.OFF_BRAND, self.ON_BRAND], guidelines)

        assert result.voice.issues == ['Uses avoided word "cheap"']
        assert result.voice.suggestions == ['Replace "cheap" with "affordable"']
        assert result.messaging.issues == ["None of the key brand messages appear in the content"]
        assert result.guidelines.issues == ['Mentions forbidden topic "politics"']

    def test_single_sample_matches_alignment(self, brand_scorer, guidelines):
        check = brand_scorer.check_alignment(self.ON_BRAND, guidelines, title="Cozy mornings")

        result = brand_scorer.check_consistency([BrandSample(content=self.ON_BRAND, title="Cozy mornings")], guidelines)

        assert (result.voice.score, result.messaging.score, result.guidelines.score) == (
            check.voice,
            check.messaging,
            check.guidelines,
        )
        assert result.overall == check.overall

    def test_empty_batch_rejected(self, brand_scorer, guidelines):
        with pytest.raises(ValidationError):
            brand_scorer.check_consistency([], guidelines)
