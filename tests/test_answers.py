"""Tests for the typed answer store and its wire encoding."""

from __future__ import annotations

from pcnwizard.wizard import questions as q
from pcnwizard.wizard.answers import Answers, BoolAnswer, SetAnswer, TextAnswer


class TestAnswers:
    def test_typed_values(self):
        answers = Answers()
        answers.set_bool(q.ACK_NOT_ADVICE, True)
        answers.set_text(q.USER_EXPLANATION, "I was loading")
        answers.set_selection(q.PRIVATE_GROUNDS, ["private_signage"])
        assert isinstance(answers.root[q.ACK_NOT_ADVICE], BoolAnswer)
        assert isinstance(answers.root[q.USER_EXPLANATION], TextAnswer)
        assert isinstance(answers.root[q.PRIVATE_GROUNDS], SetAnswer)

    def test_missing_reads(self):
        answers = Answers()
        assert answers.get_bool(q.ACK_NOT_ADVICE) is None
        assert answers.is_true(q.ACK_NOT_ADVICE) is False
        assert answers.get_text(q.USER_EXPLANATION) == ""
        assert answers.get_selection(q.PRIVATE_GROUNDS) == []

    def test_selection_is_deduplicated(self):
        answers = Answers()
        answers.set_selection(q.PRIVATE_GROUNDS, ["a", "b", "a"])
        assert answers.get_selection(q.PRIVATE_GROUNDS) == ["a", "b"]

    def test_discard(self):
        answers = Answers()
        answers.set_bool(q.MITIGATION, True)
        answers.discard(q.MITIGATION)
        answers.discard(q.MITIGATION)
        assert q.MITIGATION not in answers


class TestToggle:
    def test_add_and_remove(self):
        answers = Answers()
        assert answers.toggle(q.PRIVATE_GROUNDS, "a") is True
        assert answers.get_selection(q.PRIVATE_GROUNDS) == ["a"]
        assert answers.toggle(q.PRIVATE_GROUNDS, "a") is True
        assert answers.get_selection(q.PRIVATE_GROUNDS) == []

    def test_fourth_selection_ignored_at_bound_three(self):
        answers = Answers()
        for option in ("a", "b", "c"):
            answers.toggle(q.PRIVATE_GROUNDS, option, maximum=3)
        assert answers.toggle(q.PRIVATE_GROUNDS, "d", maximum=3) is False
        assert answers.get_selection(q.PRIVATE_GROUNDS) == ["a", "b", "c"]

    def test_deselect_allowed_at_bound(self):
        answers = Answers()
        for option in ("a", "b", "c"):
            answers.toggle(q.PRIVATE_GROUNDS, option, maximum=3)
        assert answers.toggle(q.PRIVATE_GROUNDS, "b", maximum=3) is True
        assert answers.get_selection(q.PRIVATE_GROUNDS) == ["a", "c"]


class TestWireShape:
    def test_to_wire(self):
        answers = Answers()
        answers.set_bool(q.EVIDENCE_REVIEWED, True)
        answers.set_bool(q.MITIGATION, False)
        answers.set_selection(q.COUNCIL_GROUNDS, ["SIGNAGE", "PROC"])
        answers.set_text(q.USER_EXPLANATION, "hello")
        assert answers.to_wire() == {
            q.EVIDENCE_REVIEWED: "true",
            q.MITIGATION: "false",
            q.COUNCIL_GROUNDS: "SIGNAGE,PROC",
            q.USER_EXPLANATION: "hello",
        }

    def test_from_wire_uses_selection_keys(self):
        answers = Answers.from_wire(
            {q.COUNCIL_GROUNDS: "SIGNAGE,PROC", q.MITIGATION: "true", q.USER_EXPLANATION: "x"},
            q.SELECTION_QUESTIONS,
        )
        assert answers.get_selection(q.COUNCIL_GROUNDS) == ["SIGNAGE", "PROC"]
        assert answers.get_bool(q.MITIGATION) is True
        assert answers.get_text(q.USER_EXPLANATION) == "x"

    def test_json_round_trip_keeps_types(self):
        answers = Answers()
        answers.set_bool(q.ACK_NOT_ADVICE, True)
        answers.set_text(q.USER_EXPLANATION, "true")
        restored = Answers.model_validate_json(answers.model_dump_json())
        assert restored.get_bool(q.ACK_NOT_ADVICE) is True
        assert restored.get_text(q.USER_EXPLANATION) == "true"
