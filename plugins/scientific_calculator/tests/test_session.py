import pytest

from plugins.scientific_calculator.core import (
    AngleUnit,
    CalculatorSession,
    ErrorKind,
    EvaluationMode,
    HistoryEntry,
    SessionState,
)


def _submit(session, text):
    session.clear()
    session.append(text)
    return session.submit()


def test_new_session_is_idle():
    session = CalculatorSession()
    assert session.state is SessionState.IDLE
    assert session.expression == ""
    assert session.result == ""
    assert session.error is None
    assert session.memory is None
    assert session.history == ()
    assert session.mode is EvaluationMode.BASIC
    assert session.angle_unit is AngleUnit.DEGREE


def test_basic_submit_success_records_history():
    session = CalculatorSession()
    session.append("2+3")
    session.append("*4")
    assert session.state is SessionState.HAS_INPUT
    assert session.submit() == {"result": "14"}
    assert session.state is SessionState.HAS_RESULT
    assert session.result == "14"
    assert session.error is None
    assert session.history == (HistoryEntry("2+3*4", "14"),)
    assert str(session.history[0]) == "2+3*4 = 14"


def test_division_by_zero_in_basic_mode():
    session = CalculatorSession()
    assert _submit(session, "10/0") == {"error": "DivisionByZero"}
    assert session.error is ErrorKind.DIVISION_BY_ZERO
    assert session.state is SessionState.HAS_ERROR
    assert session.result == ""


def test_syntax_error_in_basic_mode():
    session = CalculatorSession()
    assert _submit(session, "2+") == {"error": "SyntaxError"}
    assert session.error.label == "Syntax Error"


def test_basic_mode_has_no_functions():
    session = CalculatorSession()
    assert _submit(session, "sin(90)") == {"error": "GenericError"}


def test_empty_submit_is_syntax_error():
    session = CalculatorSession()
    assert session.submit() == {"error": "SyntaxError"}
    assert session.history == ()


def test_failure_leaves_expression_history_and_memory_untouched():
    session = CalculatorSession()
    _submit(session, "6*7")
    session.store_memory()
    _submit(session, "1/0")
    assert session.expression == "1/0"
    assert session.memory == "42"
    assert [str(entry) for entry in session.history] == ["6*7 = 42"]


def test_failure_clears_previous_result():
    session = CalculatorSession()
    session.append("1+1")
    session.submit()
    session.append("+")
    session.submit()
    assert session.result == ""
    assert session.error is ErrorKind.SYNTAX


def test_append_clears_error():
    session = CalculatorSession()
    _submit(session, "2+")
    session.append("3")
    assert session.error is None
    assert session.state is SessionState.HAS_INPUT
    assert session.submit() == {"result": "5"}


def test_advanced_mode_uses_angle_unit():
    session = CalculatorSession(EvaluationMode.ADVANCED)
    assert _submit(session, "sin(90)") == {"result": "1"}
    session.toggle_angle_unit()
    assert session.angle_unit is AngleUnit.RADIAN
    assert _submit(session, "sin(1.5707963267948966)") == {"result": "1"}


def test_toggle_angle_unit_does_not_touch_history_or_expression():
    session = CalculatorSession("advanced", "degree")
    session.append("asin(1)")
    session.submit()
    before = session.history
    session.toggle_angle_unit()
    assert session.history == before
    assert session.history[0].result == "90"
    assert session.expression == "asin(1)"
    assert session.result == "90"
    assert session.state is SessionState.HAS_RESULT


def test_advanced_failures():
    session = CalculatorSession("advanced")
    assert _submit(session, "inv(0)") == {"error": "DivisionByZero"}
    assert _submit(session, "sqrt(-1)") == {"error": "DivisionByZero"}
    assert _submit(session, "pow(2)") == {"error": "EvaluationError"}


def test_metric_mode_conversions():
    session = CalculatorSession("metric")
    assert _submit(session, "10 m to km") == {"result": "0.01"}
    assert _submit(session, "0 °C to °F") == {"result": "32"}
    assert _submit(session, "3+4") == {"result": "7"}
    assert _submit(session, "sin(3) m to km") == {"error": "GenericError"}


def test_change_mode_resets_input_but_keeps_history_and_memory():
    session = CalculatorSession()
    _submit(session, "5*5")
    session.store_memory()
    session.append("+1")
    session.change_mode("metric")
    assert session.mode is EvaluationMode.METRIC
    assert session.state is SessionState.IDLE
    assert (session.expression, session.result, session.error) == ("", "", None)
    assert session.memory == "25"
    assert len(session.history) == 1


def test_change_mode_rejects_unknown_mode():
    session = CalculatorSession()
    session.append("1")
    with pytest.raises(ValueError):
        session.change_mode("hex")
    assert session.expression == "1"
    assert session.mode is EvaluationMode.BASIC


def test_memory_store_and_recall_round_trip_exact_text():
    session = CalculatorSession()
    _submit(session, "1/3")
    assert session.store_memory() is True
    assert session.memory == "0.3333333333333333"
    session.clear()
    session.append("2*")
    assert session.recall_memory() is True
    assert session.expression == "2*0.3333333333333333"
    assert session.state is SessionState.HAS_INPUT


def test_store_memory_requires_a_result():
    session = CalculatorSession()
    assert session.store_memory() is False
    session.append("1+1")
    assert session.store_memory() is False
    session.submit()
    session.append("+")
    assert session.store_memory() is False
    assert session.memory is None


def test_clear_memory_makes_recall_a_no_op():
    session = CalculatorSession()
    _submit(session, "0")
    session.store_memory()
    assert session.memory == "0"
    session.clear_memory()
    session.clear()
    session.append("7")
    assert session.recall_memory() is False
    assert session.expression == "7"
    assert session.memory is None


def test_history_is_append_only_in_submission_order():
    session = CalculatorSession()
    expressions = ["1+1", "2*3", "bad+", "10-4", "1/0", "9%4"]
    for expression in expressions:
        _submit(session, expression)
    assert [str(entry) for entry in session.history] == ["1+1 = 2", "2*3 = 6", "10-4 = 6", "9%4 = 1"]


def test_history_limit_evicts_oldest():
    session = CalculatorSession(history_limit=2)
    for expression in ["1", "2", "3"]:
        _submit(session, expression)
    assert [entry.expression for entry in session.history] == ["2", "3"]
    assert session.history_limit == 2


def test_history_limit_must_be_positive():
    with pytest.raises(ValueError):
        CalculatorSession(history_limit=0)


def test_clear_is_idempotent():
    session = CalculatorSession()
    _submit(session, "4/0")
    session.clear()
    once = session.snapshot()
    session.clear()
    assert session.snapshot() == once
    assert session.state is SessionState.IDLE
    assert (session.expression, session.result, session.error) == ("", "", None)


def test_backspace():
    session = CalculatorSession()
    session.append("12")
    session.backspace()
    assert session.expression == "1"
    assert session.state is SessionState.HAS_INPUT
    session.backspace()
    assert session.expression == ""
    assert session.state is SessionState.IDLE
    session.backspace()
    assert session.state is SessionState.IDLE


def test_backspace_after_result_keeps_result_storable():
    session = CalculatorSession()
    _submit(session, "12+3")
    session.backspace()
    assert session.expression == "12+"
    assert session.state is SessionState.HAS_RESULT
    assert session.result == "15"
    assert session.store_memory() is True
    assert session.memory == "15"


def test_backspace_after_error_keeps_error_state():
    session = CalculatorSession()
    _submit(session, "2++")
    session.backspace()
    assert session.expression == "2+"
    assert session.state is SessionState.HAS_ERROR
    assert session.error is ErrorKind.SYNTAX


def test_backspace_to_empty_goes_idle_from_any_state():
    session = CalculatorSession()
    _submit(session, "7")
    session.backspace()
    assert session.expression == ""
    assert session.state is SessionState.IDLE


def test_comment_in_input_is_rejected_and_not_recorded():
    session = CalculatorSession()
    assert _submit(session, "2+3 # junk") == {"error": "SyntaxError"}
    assert session.history == ()


def test_set_angle_unit_explicitly():
    session = CalculatorSession()
    assert session.set_angle_unit("radian") is AngleUnit.RADIAN
    with pytest.raises(ValueError):
        session.set_angle_unit("turns")


def test_snapshot_is_json_friendly():
    session = CalculatorSession("advanced", "radian")
    _submit(session, "sqrt(-4)")
    snapshot = session.snapshot()
    assert snapshot == {
        "expression": "sqrt(-4)",
        "result": "",
        "error": "DivisionByZero",
        "error_label": "Error: Division by zero",
        "state": "has_error",
        "mode": "advanced",
        "angle_unit": "radian",
        "memory": None,
        "history": [],
    }
