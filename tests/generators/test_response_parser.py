"""
Unit tests for ModelResponseParser

Tests cover:
1. JSON strategy (plain, fenced, surrounded by prose, defaults, bad elements)
2. TC marker strategy
3. Numbered list strategy
4. Unparseable input
"""

import json

import pytest
from story_testgen.core.models import Priority
from story_testgen.generators.response_parser import (
    ModelResponseParser,
    DEFAULT_JSON_STEPS,
    DEFAULT_TEXT_STEPS,
    DEFAULT_TEXT_EXPECTED,
    extract_text_steps,
    extract_text_expected,
)


@pytest.fixture
def parser():
    return ModelResponseParser()


@pytest.fixture
def three_cases_json():
    return json.dumps([
        {
            "title": "TC-01: Valid login",
            "description": "Log in with valid credentials",
            "steps": ["Open login page", "Enter credentials", "Submit"],
            "expectedResult": "Dashboard is shown",
            "priority": "High",
        },
        {
            "title": "TC-02: Invalid password",
            "description": "Reject a wrong password",
            "steps": ["Open login page", "Enter wrong password"],
            "expectedResult": "Error is shown",
            "priority": "Medium",
        },
        {
            "title": "TC-03: Remember me",
            "description": "Session persists",
            "steps": ["Tick remember me"],
            "expectedResult": "User stays logged in",
            "priority": "low",
        },
    ], indent=2)


# ============================================================================
# JSON STRATEGY TESTS
# ============================================================================

class TestJsonStrategy:
    """Tests for JSON array parsing"""

    def test_plain_array_in_order(self, parser, three_cases_json):
        """Test parsing a JSON array in order"""
        cases = parser.parse(three_cases_json)

        assert [c.title for c in cases] == [
            "TC-01: Valid login",
            "TC-02: Invalid password",
            "TC-03: Remember me",
        ]
        assert cases[0].steps == ["Open login page", "Enter credentials", "Submit"]
        assert cases[0].expected_result == "Dashboard is shown"
        assert [c.priority for c in cases] == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]

    def test_fenced_matches_unfenced(self, parser, three_cases_json):
        """Test that a json fenced reply parses like the bare array"""
        fenced = f"```json\n{three_cases_json}\n```"

        assert parser.parse(fenced) == parser.parse(three_cases_json)

    def test_untagged_fence(self, parser, three_cases_json):
        """Test an untagged code fence"""
        assert len(parser.parse(f"```\n{three_cases_json}\n```")) == 3

    def test_prose_around_array_ignored(self, parser, three_cases_json):
        """Test that prose around the array is ignored"""
        response = f"Here are the test cases you asked for:\n\n{three_cases_json}\n\nLet me know if you need more!"

        assert parser.parse(response) == parser.parse(three_cases_json)

    def test_missing_fields_get_defaults(self, parser):
        """Test defaults for missing fields"""
        case = parser.parse("[{}]")[0]

        assert case.title == "Untitled Test Case"
        assert case.description == ""
        assert case.steps == DEFAULT_JSON_STEPS
        assert case.expected_result == ""
        assert case.priority == Priority.MEDIUM

    def test_empty_title_gets_default(self, parser):
        """Test that a blank title gets the default"""
        case = parser.parse('[{"title": "   ", "steps": ["a"]}]')[0]

        assert case.title == "Untitled Test Case"

    def test_unknown_priority_is_medium(self, parser):
        """Test that an unknown priority becomes Medium"""
        case = parser.parse('[{"title": "T", "priority": "Urgent"}]')[0]

        assert case.priority == Priority.MEDIUM

    def test_scalar_values_stringified(self, parser):
        """Test that numeric values are stringified and non-scalar steps dropped"""
        case = parser.parse('[{"title": 7, "steps": [1, "  ", "Open", {"x": 1}]}]')[0]

        assert case.title == "7"
        assert case.steps == ["1", "Open"]

    def test_bad_elements_skipped(self, parser):
        """Test that malformed elements are skipped"""
        response = '[{"title": "A", "steps": ["x"]}, 42, {"title": {"nested": 1}}, {"title": "B"}]'

        cases = parser.parse(response)

        assert [c.title for c in cases] == ["A", "B"]

    def test_default_steps_not_shared(self, parser):
        """Test that default steps are not shared between cases"""
        first, second = parser.parse("[{}, {}]")
        first.steps.append("extra")

        assert second.steps == DEFAULT_JSON_STEPS

    def test_invalid_json_yields_nothing(self, parser):
        """Test that invalid JSON yields nothing"""
        assert parser.parse("[this is not json") == []


# ============================================================================
# TEXT STRATEGY TESTS
# ============================================================================

class TestTcMarkerStrategy:
    """Tests for 'TC-<n>:' segmented text"""

    def test_segments_become_cases(self, parser):
        """Test splitting on TC markers"""
        response = (
            "TC-1: Login works\n"
            "User signs in with valid credentials\n"
            "Expected Result: Dashboard shown.\n"
            "Step 1: Open page Step 2: Submit form\n"
            "TC-2: Logout works\n"
            "Given a logged in user When they click logout Then the login page shows\n"
        )

        cases = parser.parse(response)

        assert len(cases) == 2
        assert "Login works" in cases[0].title
        assert cases[0].title == "TC-1: Login works"
        assert cases[0].description == "User signs in with valid credentials"
        assert cases[0].steps == ["Open page", "Submit form"]
        assert cases[0].expected_result == "Dashboard shown"
        assert cases[0].priority == Priority.MEDIUM
        assert cases[1].title == "TC-2: Logout works"
        assert cases[1].steps == ["a logged in user", "they click logout", "the login page shows"]

    def test_single_line_segment_uses_headline_as_description(self, parser):
        """Test a single line segment"""
        case = parser.parse("TC-1: Search returns results")[0]

        assert case.description == "Search returns results"
        assert case.steps == DEFAULT_TEXT_STEPS
        assert case.expected_result == DEFAULT_TEXT_EXPECTED


class TestNumberedListStrategy:
    """Tests for numbered list fallback"""

    def test_numbered_items(self, parser):
        """Test splitting on numbered items"""
        response = (
            "1. Login with valid password\n"
            "User should reach the dashboard.\n"
            "2) Login with wrong password\n"
            "User should see an error.\n"
        )

        cases = parser.parse(response)

        assert [c.title for c in cases] == [
            "TC-1: Login with valid password",
            "TC-2: Login with wrong password",
        ]
        assert cases[0].description == "User should reach the dashboard."
        assert cases[0].expected_result == "reach the dashboard"
        assert cases[1].expected_result == "see an error"

    def test_indented_sub_steps_stay_in_their_case(self, parser):
        """Test that indented sub-steps do not start new test cases"""
        response = (
            "1. Login with valid credentials\n"
            "   1. Open the app\n"
            "   2. Enter credentials\n"
            "2. Logout clears the session\n"
            "   1. Tap logout"
        )

        cases = parser.parse(response)

        assert len(cases) == 2
        assert [c.title for c in cases] == [
            "TC-1: Login with valid credentials",
            "TC-2: Logout clears the session",
        ]


class TestUnparseable:
    """Tests for input no strategy understands"""

    @pytest.mark.parametrize("raw", [None, "", "   ", "lorem ipsum dolor sit amet"])
    def test_returns_empty_list(self, parser, raw):
        """Test that unparseable input gives an empty list"""
        assert parser.parse(raw) == []

    def test_failing_strategy_does_not_raise(self, parser):
        """Test that a failing strategy is skipped"""
        def broken(text):
            raise RuntimeError("boom")

        parser.strategies = (("broken", broken),) + tuple(parser.strategies)

        assert len(parser.parse('[{"title": "A"}]')) == 1


class TestTextHelpers:
    """Tests for step and expectation extraction from free text"""

    def test_numbered_steps(self):
        """Test numbered step clauses"""
        assert extract_text_steps("1. Open 2. Click") == ["Open", "Click"]

    def test_default_steps(self):
        """Test the default text steps"""
        assert extract_text_steps("nothing structured") == DEFAULT_TEXT_STEPS

    def test_step_clause_ends_at_end_of_text(self):
        """Test that a step clause must reach a marker or the end of the text"""
        assert extract_text_steps("Step 1: Open the app\nStep 2: Log in") == ["Log in"]

    def test_expectation_needs_period_or_end_of_text(self):
        """Test that an expectation cut by a line break is not matched"""
        assert extract_text_expected("It should save\nand close.") == DEFAULT_TEXT_EXPECTED

    def test_expected_outcome_label(self):
        """Test the Expected Outcome label"""
        assert extract_text_expected("Expected Outcome: Saved") == "Saved"

    def test_will_clause(self):
        """Test a will clause"""
        assert extract_text_expected("The page will reload.") == "reload"
