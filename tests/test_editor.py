#!/usr/bin/env python3
"""
Tests for the incremental expression editor.

Drives ExpressionEditor through keypad labels and checks the expression
text, result and side effects after each sequence.
"""

import pytest

from keypad_calculator.config.settings import CalculatorSettings
from keypad_calculator.core.editor import ExpressionEditor
from keypad_calculator.models.editor_models import KeyKind, PressToken
from keypad_calculator.storage.key_value_store import InMemoryStore, KeyValueStore


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def editor(store):
    """Create a fresh editor over an in-memory store."""
    return ExpressionEditor(store=store)


def press(editor, *labels):
    editor.press_sequence(labels)
    return editor


class TestDigitEntry:
    def test_zero_is_not_repeated(self, editor):
        press(editor, "0", "0")
        assert editor.expression == "0"

    def test_zero_point_five(self, editor):
        press(editor, "0", ".", "5")
        assert editor.expression == "0.5"

    def test_leading_zero_is_replaced(self, editor):
        press(editor, "0", "3")
        assert editor.expression == "3"

    def test_leading_zero_in_later_segment(self, editor):
        press(editor, "5", "+", "0", "0", "7")
        assert editor.expression == "5+7"

    def test_zeros_after_point_are_kept(self, editor):
        press(editor, "0", ".", "0", "0")
        assert editor.expression == "0.00"

    def test_digit_after_evaluation_starts_fresh(self, editor):
        press(editor, "1", "+", "2", "=", "9")
        assert editor.expression == "9"
        assert editor.result == ""


class TestDecimalPoint:
    def test_second_point_rejected(self, editor):
        press(editor, "1", ".", "5", ".")
        assert editor.expression == "1.5"

    def test_point_in_new_segment(self, editor):
        press(editor, "1", ".", "5", "+", ".", "5")
        assert editor.expression == "1.5+.5"
        assert editor.live_preview == "2"

    def test_point_after_evaluation(self, editor):
        press(editor, "1", "+", "2", "=", ".")
        assert editor.expression == "0."
        assert editor.result == ""


class TestOperators:
    def test_aliases_are_normalized(self, editor):
        press(editor, "2", "*", "3", "/", "1", "−", "1")
        assert editor.expression == "2×3÷1-1"

    def test_continuation_after_equals(self, editor):
        press(editor, "1", "+", "2", "=")
        assert editor.result == "3"

        press(editor, "+", "4", "=")
        assert editor.result == "7"
        assert editor.history == ["3+4 = 7", "1+2 = 3"]

    def test_paren_continues_from_result(self, editor):
        press(editor, "4", "=", "(")
        assert editor.expression == "4("
        assert not editor.state.just_evaluated

    def test_precedence(self, editor):
        press(editor, "2", "+", "3", "×", "4", "=")
        assert editor.result == "14"


class TestToggleSign:
    def test_toggle_is_its_own_inverse(self, editor):
        press(editor, "4", "+/-")
        assert editor.expression == "-(4)"

        press(editor, "+/-")
        assert editor.expression == "4"

    def test_toggle_zero_is_no_op(self, editor):
        press(editor, "0", "+/-")
        assert editor.expression == "0"

    def test_toggle_last_operand(self, editor):
        press(editor, "5", "×", "3", "+/-", "=")
        assert editor.result == "-15"

    def test_toggle_bare_unary_minus(self, editor):
        press(editor, "5", "×", "-", "3", "+/-")
        assert editor.expression == "5×3"

    def test_subtracted_group_keeps_its_value(self, editor):
        press(editor, "5", "-", "(", "3", ")", "+/-")
        assert editor.expression == "5-(3)"

        press(editor, "=")
        assert editor.result == "2"

    def test_toggle_with_nothing_to_toggle(self, editor):
        press(editor, "5", "+", "+/-")
        assert editor.expression == "5+"

    def test_toggle_after_evaluation(self, editor):
        press(editor, "2", "+", "3", "=", "+/-")
        assert editor.expression == "-(5)"
        assert editor.result == ""
        assert not editor.state.just_evaluated


class TestBackspaceAndClear:
    def test_backspace_removes_one_character(self, editor):
        press(editor, "1", "2", "3", "⌫")
        assert editor.expression == "12"

    def test_backspace_after_evaluation_edits_expression(self, editor):
        press(editor, "1", "+", "2", "=", "⌫")
        assert editor.expression == "1+"
        assert not editor.state.just_evaluated

    def test_clear_all(self, editor):
        press(editor, "1", "+", "2", "=", "C")
        assert editor.expression == ""
        assert editor.result == ""

    def test_clear_entry(self, editor):
        press(editor, "7", "CE")
        assert editor.expression == ""
        assert editor.result == ""

    def test_backspace_on_empty_display_resets_everything(self, editor, store):
        press(editor, "5", "=", "M+", "C")
        assert editor.memory == 5.0
        assert editor.history == ["5 = 5"]

        press(editor, "⌫")
        assert editor.memory == 0.0
        assert editor.history == []
        assert editor.state.undo_stack == []
        assert store.load_double("memory_value") == 0.0
        assert store.load_string_list("calc_history") == []


class TestFunctions:
    def test_sqrt(self, editor):
        press(editor, "1", "6", "√")
        assert editor.expression == "sqrt(16)"
        assert editor.result == ""

        press(editor, "=")
        assert editor.result == "4"

    def test_function_on_empty_expression(self, editor):
        press(editor, "sin")
        assert editor.expression == "sin(0)"

    def test_square_after_evaluation(self, editor):
        press(editor, "3", "=", "x²")
        assert editor.expression == "(3)^2"

        press(editor, "=")
        assert editor.result == "9"

    def test_factorial(self, editor):
        press(editor, "5", "n!", "=")
        assert editor.result == "120"

    def test_function_wraps_whole_expression(self, editor):
        press(editor, "1", "0", "0", "0", "log", "=")
        assert editor.result == "3"


class TestPercent:
    def test_percent_of_literal(self, editor):
        press(editor, "5", "0", "+", "2", "0", "%", "=")
        assert editor.result == "50.2"

    def test_percent_needs_an_operand(self, editor):
        press(editor, "%")
        assert editor.expression == ""

        press(editor, "5", "+", "%")
        assert editor.expression == "5+"

    def test_percent_after_paren(self, editor):
        press(editor, "2", "0", "+/-", "%", "=")
        assert editor.result == "-0.2"

    def test_percent_after_evaluation(self, editor):
        press(editor, "5", "0", "=", "%")
        assert editor.expression == "50%"


class TestEquals:
    def test_invalid_expression(self, editor):
        press(editor, "5", "÷", "0", "=")
        assert editor.result == "Invalid"
        assert not editor.state.just_evaluated
        assert editor.history == []

    def test_deeply_nested_expression_is_invalid(self, editor):
        editor.state.expression_text = "sqrt(" * 1500 + "4" + ")" * 1500
        assert editor.live_preview is None

        press(editor, "=")
        assert editor.result == "Invalid"
        assert editor.history == []

    def test_empty_expression(self, editor):
        press(editor, "=")
        assert editor.result == "Invalid"

    def test_history_keeps_twenty_newest(self, editor):
        for i in range(1, 26):
            press(editor, *str(i), "=")

        assert len(editor.history) == 20
        assert editor.history[0] == "25 = 25"
        assert editor.history[-1] == "6 = 6"


class TestMemory:
    def test_recall_unset_memory_is_no_op(self, editor):
        press(editor, "5", "MR")
        assert editor.expression == "5"

    def test_add_and_recall(self, editor):
        press(editor, "2", "+", "3", "=", "M+", "C", "1", "+", "MR", "=")
        assert editor.memory == 5.0
        assert editor.result == "6"

    def test_subtract(self, editor):
        press(editor, "3", "=", "M-")
        assert editor.memory == -3.0

    def test_recall_decimal(self, editor):
        press(editor, "2", ".", "5", "=", "M+", "C", "MR")
        assert editor.expression == "2.5"

    def test_recall_after_evaluation_starts_fresh(self, editor):
        press(editor, "4", "=", "M+", "MR")
        assert editor.expression == "4"
        assert editor.result == ""

    def test_recall_replaces_trailing_number(self, editor):
        editor.state.memory = 2.5
        press(editor, "3", ".", "MR")
        assert editor.expression == "2.5"

        press(editor, "+", "7", "MR")
        assert editor.expression == "2.5+2.5"

    def test_recall_zero_onto_zero(self, editor):
        press(editor, "MC", "0", "MR")
        assert editor.expression == "0"

    def test_recall_negative_is_wrapped(self, editor):
        press(editor, "3", "=", "M-", "C", "5", "+", "MR")
        assert editor.expression == "5+-(3)"

        press(editor, "=")
        assert editor.result == "2"

    def test_recall_negative_replaces_operand(self, editor):
        editor.state.memory = -3.0
        press(editor, "5", "MR")
        assert editor.expression == "-(3)"

    def test_recall_after_closed_operand_is_no_op(self, editor):
        editor.state.memory = 4.0
        for closed in (["(", "2", ")"], ["2", "%"], ["3", "x!"]):
            press(editor, "C", *closed)
            before = editor.expression
            press(editor, "MR")
            assert editor.expression == before

    def test_recall_tiny_value(self, editor):
        editor.state.memory = 5.55e-17
        press(editor, "MR")
        assert editor.expression == "0.0000000000000000555"

    def test_recall_non_finite_is_no_op(self, editor):
        editor.state.memory = float("inf")
        press(editor, "1", "+", "MR")
        assert editor.expression == "1+"

    def test_add_without_numeric_result(self, editor):
        press(editor, "5", "÷", "0", "=", "M+")
        assert editor.memory is None

    def test_memory_clear(self, editor, store):
        press(editor, "4", "=", "M+", "MC")
        assert editor.memory == 0.0
        assert store.load_double("memory_value") == 0.0


class TestUndoRedo:
    def test_undo_then_redo_restores(self, editor):
        press(editor, "1", "2", "+", "3")
        press(editor, "undo")
        assert editor.expression == "12+"

        press(editor, "redo")
        assert editor.expression == "12+3"

    def test_undo_past_oldest_is_no_op(self, editor):
        press(editor, "1", "2")
        press(editor, "undo", "undo", "undo", "undo")
        assert editor.expression == ""

    def test_redo_with_empty_stack_is_no_op(self, editor):
        press(editor, "1", "redo")
        assert editor.expression == "1"

    def test_new_edit_clears_redo(self, editor):
        press(editor, "1", "2", "undo", "5")
        assert editor.expression == "15"
        assert editor.state.redo_stack == []

    def test_undo_clears_result(self, editor):
        press(editor, "1", "+", "2", "=")
        press(editor, "undo")
        assert editor.expression == "1+"
        assert editor.result == ""
        assert not editor.state.just_evaluated

    def test_undo_stack_is_capped(self, editor):
        for _ in range(150):
            press(editor, "1")
        assert len(editor.state.undo_stack) == 100

    def test_no_op_press_does_not_record(self, editor):
        press(editor, "1", ".", ".")
        assert editor.state.undo_stack == ["", "1"]


class TestLivePreview:
    def test_preview_of_partial_expression(self, editor):
        press(editor, "2", "+", "3")
        assert editor.live_preview == "5"

    def test_preview_of_incomplete_expression(self, editor):
        press(editor, "2", "+")
        assert editor.live_preview is None

    def test_no_preview_after_evaluation(self, editor):
        press(editor, "2", "+", "3", "=")
        assert editor.live_preview is None

    def test_snapshot(self, editor):
        press(editor, "4", "=", "M+", "+", "1")
        snapshot = editor.snapshot()
        assert snapshot.expression == "4+1"
        assert snapshot.preview == "5"
        assert snapshot.memory_set
        assert snapshot.as_dict()["expression"] == "4+1"


class TestPersistence:
    def test_memory_and_history_rehydrate(self, store):
        first = ExpressionEditor(store=store)
        press(first, "6", "×", "7", "=", "M+")

        second = ExpressionEditor(store=store)
        assert second.memory == 42.0
        assert second.history == ["6×7 = 42"]

    def test_clear_history_persists(self, editor, store):
        press(editor, "1", "=")
        editor.clear_history()
        assert editor.history == []
        assert store.load_string_list("calc_history") == []

    def test_flush(self, editor, store):
        press(editor, "1", "=")
        store.remove("calc_history")
        editor.flush()
        assert store.load_string_list("calc_history") == ["1 = 1"]

    def test_custom_settings(self, store):
        settings = CalculatorSettings(history_limit=2, history_key="h")
        editor = ExpressionEditor(store=store, settings=settings)
        press(editor, "1", "=", "2", "=", "3", "=")
        assert store.load_string_list("h") == ["3 = 3", "2 = 2"]

    def test_store_failures_do_not_break_editing(self, caplog):
        class BrokenStore(InMemoryStore):
            def save_string_list(self, key, values):
                raise OSError("read-only")

            def save_double(self, key, value):
                raise OSError("read-only")

        editor = ExpressionEditor(store=BrokenStore())
        press(editor, "2", "+", "2", "=", "M+")
        assert editor.result == "4"
        assert editor.memory == 4.0
        assert "Failed to persist" in caplog.text


class TestPressTokens:
    def test_press_token_directly(self, editor):
        editor.press(PressToken.digit("8"))
        editor.press(PressToken.of(KeyKind.TOGGLE_SIGN))
        assert editor.expression == "-(8)"

    def test_unknown_label(self, editor):
        with pytest.raises(ValueError):
            editor.press_label("foo")

    def test_accepts_any_store(self):
        assert isinstance(ExpressionEditor().store, KeyValueStore)
