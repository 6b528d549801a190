# tests for signal extraction — trend, triggers, themes, growth, techniques

from datetime import datetime, timezone

from companion.models.context import default_therapy_context, TherapyContext
from companion.models.journal import JournalEntry
from companion.models.mood import MoodEntry
from companion.models.therapy import TherapySession
from companion.services import signals


def _mood(i, mood, trigger=None):
    return MoodEntry(
        id=f"m{i}", user_id="u", date=datetime(2025, 6, 15 - i, tzinfo=timezone.utc), mood=mood, trigger=trigger
    )


def _journal(i, content, mood=None, tags=()):
    return JournalEntry(
        id=f"j{i}", user_id="u", date=datetime(2025, 6, 15 - i, tzinfo=timezone.utc),
        content=content, mood=mood, tags=frozenset(tags),
    )


class TestMoodTrend:
    """improving / declining / stable classification"""

    def test_declining(self):
        # chronological 8,8,8,2,2,2 → most recent first 2,2,2,8,8,8
        assert signals.calculate_mood_trend([2, 2, 2, 8, 8, 8]) == "declining"

    def test_improving(self):
        assert signals.calculate_mood_trend([8, 8, 8, 2, 2, 2]) == "improving"

    def test_stable(self):
        assert signals.calculate_mood_trend([5, 5, 5, 5, 5, 5]) == "stable"

    def test_fewer_than_three_is_stable(self):
        assert signals.calculate_mood_trend([]) == "stable"
        assert signals.calculate_mood_trend([1]) == "stable"
        assert signals.calculate_mood_trend([1, 9]) == "stable"

    def test_deadband(self):
        # 5.33 vs 5.0 is inside ±0.5
        assert signals.calculate_mood_trend([6, 5, 5, 5, 5, 5]) == "stable"

    def test_short_history_splits_in_half(self):
        # recent [2, 3], older [8]
        assert signals.calculate_mood_trend([2, 3, 8]) == "declining"
        assert signals.calculate_mood_trend([9, 8, 7, 2]) == "improving"

    def test_only_six_most_recent_values_compared(self):
        assert signals.calculate_mood_trend([5, 5, 5, 5, 5, 5, 1, 1, 1]) == "stable"


class TestTriggerRanking:
    """trigger frequency ranking"""

    def test_frequency_order(self):
        entries = [_mood(0, 5, "work"), _mood(1, 5, "work"), _mood(2, 5, "sleep"), _mood(3, 5, "work")]
        ranked = signals.rank_triggers(entries)
        assert ranked.index("work") < ranked.index("sleep")

    def test_ties_broken_by_recency(self):
        entries = [_mood(0, 5, "sleep"), _mood(1, 5, "work"), _mood(2, 5, "work"), _mood(3, 5, "sleep")]
        assert signals.rank_triggers(entries) == ["sleep", "work"]

    def test_normalised_and_blank_skipped(self):
        entries = [_mood(0, 5, " Exam "), _mood(1, 5, "exam"), _mood(2, 5, None), _mood(3, 5, "  ")]
        assert signals.rank_triggers(entries) == ["exam"]

    def test_capped_at_five(self):
        entries = [_mood(i, 5, f"t{i}") for i in range(8)]
        assert len(signals.rank_triggers(entries)) == 5


class TestThemes:
    """keyword themes and growth moments"""

    def test_extract_themes_with_tags(self):
        themes = signals.extract_themes("So much pressure at the office", tags=["Exams"])
        assert themes == frozenset({"stress", "work", "exams"})

    def test_journal_themes_union(self):
        entries = [_journal(0, "I feel anxious"), _journal(1, "Proud of my progress")]
        assert signals.journal_themes(entries) == frozenset({"anxiety", "growth"})

    def test_growth_moments_by_mood_or_keyword(self):
        entries = [
            _journal(0, "A rough day", mood=2),
            _journal(1, "Felt better after a walk", mood=2),
            _journal(2, "Nothing special", mood=7),
        ]
        moments = signals.growth_moments(entries)
        assert moments == ["Jun 14: Felt better after a walk", "Jun 13: Nothing special"]

    def test_growth_moments_capped_and_excerpted(self):
        entries = [_journal(i, "progress " * 30, mood=8) for i in range(5)]
        moments = signals.growth_moments(entries)
        assert len(moments) == 3
        assert moments[0].endswith("...")


class TestTherapySignals:
    """approaches, techniques and homework reminders"""

    def test_derive_approaches(self):
        sessions = [
            TherapySession(id="s1", user_id="u", date=datetime(2025, 6, 1, tzinfo=timezone.utc),
                           techniques=["Cognitive restructuring", "Body scan"]),
        ]
        assert signals.derive_approaches(sessions) == frozenset({"CBT", "mindfulness"})

    def test_derive_approaches_empty(self):
        assert signals.derive_approaches([]) == frozenset()

    def test_relevant_techniques_with_default_approaches(self):
        techniques = signals.relevant_techniques("I keep worrying and feel anxious", default_therapy_context())
        assert techniques == ["Cognitive Restructuring", "Mindfulness Meditation"]

    def test_relevant_techniques_respect_available_approaches(self):
        ctx = TherapyContext(therapeutic_approaches=frozenset({"DBT"}))
        assert signals.relevant_techniques("I feel anxious", ctx) == []

    def test_relevant_techniques_ordered_and_deduped(self):
        techniques = signals.relevant_techniques(
            "I'm sad and stuck in negative thinking", default_therapy_context()
        )
        assert techniques == [
            "Behavioral Activation",
            "Self-Compassion Exercises",
            "Cognitive Restructuring",
            "Thought Record",
            "Gradual Exposure",
        ]

    def test_homework_reminders_for_placeholder_homework(self):
        reminders = signals.homework_reminders(default_therapy_context())
        assert reminders == [
            "Remember your mood tracking homework from our last session",
            "Consider practicing the breathing exercise we discussed",
            "Try filling in a thought record the next time a difficult thought shows up",
        ]

    def test_homework_reminders_unrecognised(self):
        ctx = TherapyContext(assigned_homework=["Call a friend"])
        assert signals.homework_reminders(ctx) == []


class TestJournalInsights:
    """observations about a single entry"""

    def test_anxiety_and_growth(self):
        content = "Still anxious but I feel better than last week"
        insights = signals.journal_insights(content, signals.extract_themes(content))
        assert len(insights) == 2
        assert "anxiety" in insights[0]
        assert "growth" in insights[1]

    def test_many_themes(self):
        content = "anxious, sad, stressed and angry about work"
        insights = signals.journal_insights(content, signals.extract_themes(content))
        assert any("several different emotions" in i for i in insights)

    def test_no_insights(self):
        assert signals.journal_insights("A quiet day at home.", frozenset()) == []


class TestEmotionalContext:
    """support band labels"""

    def test_bands(self):
        assert signals.emotional_context(1) == "crisis-support"
        assert signals.emotional_context(3) == "crisis-support"
        assert signals.emotional_context(4) == "low-mood-support"
        assert signals.emotional_context(5) == "low-mood-support"
        assert signals.emotional_context(6) == "general-support"
        assert signals.emotional_context(None) == "general-support"
