# tests for the keyword rule tables and the generic matcher

from companion.services.rules import (
    APPROACH_RULES,
    TECHNIQUE_RULES,
    THEME_RULES,
    TRIGGER_CATEGORY_RULES,
    KeywordRule,
    first_match,
    match_rules,
)


class TestMatchRules:
    """generic keyword matcher"""

    def test_case_insensitive_substring(self):
        rules = (KeywordRule(("panic",), ("anxiety",)),)
        assert match_rules("I had a PANIC attack", rules) == ["anxiety"]

    def test_no_match_is_empty(self):
        rules = (KeywordRule(("panic",), ("anxiety",)),)
        assert match_rules("a calm afternoon", rules) == []

    def test_empty_text(self):
        assert match_rules("", THEME_RULES) == []
        assert match_rules(None, THEME_RULES) == []

    def test_tags_keep_rule_order_and_dedupe(self):
        rules = (
            KeywordRule(("a",), ("first", "second")),
            KeywordRule(("b",), ("second", "third")),
        )
        assert match_rules("a b", rules) == ["first", "second", "third"]

    def test_conditional_rule_needs_available_label(self):
        rules = (KeywordRule(("worry",), ("Cognitive Restructuring",), requires="CBT"),)
        assert match_rules("I worry a lot", rules) == []
        assert match_rules("I worry a lot", rules, available={"DBT"}) == []
        assert match_rules("I worry a lot", rules, available={"cbt"}) == ["Cognitive Restructuring"]

    def test_first_match(self):
        assert first_match("my exam is tomorrow", TRIGGER_CATEGORY_RULES) == "study"
        assert first_match("nothing in particular", TRIGGER_CATEGORY_RULES) is None


class TestRuleTables:
    """content of the shipped rule tables"""

    def test_theme_rules_cover_negative_and_positive(self):
        text = "I'm anxious about my job but grateful for my partner"
        assert match_rules(text, THEME_RULES) == ["anxiety", "work", "relationships", "gratitude"]

    def test_approach_rules(self):
        assert match_rules("Thought record\nBody scan", APPROACH_RULES) == ["CBT", "mindfulness"]
        assert match_rules("Distress tolerance skills", APPROACH_RULES) == ["DBT"]

    def test_technique_rules_unconditional(self):
        assert match_rules("I feel stuck", TECHNIQUE_RULES, available=set()) == [
            "Behavioral Activation",
            "Gradual Exposure",
        ]

    def test_trigger_categories(self):
        assert first_match("deadline at the office", TRIGGER_CATEGORY_RULES) == "work"
        assert first_match("argument with my partner", TRIGGER_CATEGORY_RULES) == "relationship"
        assert first_match("could not sleep", TRIGGER_CATEGORY_RULES) == "sleep"
