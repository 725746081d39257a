"""httprunner conditions - @dependsOn, @if and @if-not eligibility checks."""

from httprunner.context import ContextStore
from httprunner.models import Condition, ConditionEvaluation, ConditionType
from httprunner.variables import extract_json_value


def check_dependency(depends_on: str | None, store: ContextStore) -> bool:
    """True when there is no dependency or the named request succeeded."""
    if not depends_on:
        return True
    result = store.result_for(depends_on)
    return result is not None and result.success


def evaluate_condition(condition: Condition, store: ContextStore) -> ConditionEvaluation:
    """Evaluate one condition.

    A reference to an unknown or unexecuted request is never met, with or
    without negation.
    """
    result = store.result_for(condition.request_name)
    if result is None:
        return ConditionEvaluation(condition, met=False)

    expected = condition.expected_value.strip()
    if condition.type is ConditionType.STATUS:
        actual = str(result.status_code)
        matched = actual == expected
    elif result.response_body is None:
        actual = "<no body>"
        matched = False
    else:
        value = extract_json_value(result.response_body, condition.json_path or "")
        if value is None:
            actual = "<not found>"
            matched = False
        else:
            actual = value
            matched = value.strip() == expected

    return ConditionEvaluation(condition, met=matched != condition.negate, actual_value=actual)


def evaluate_conditions_verbose(
    conditions: list[Condition],
    store: ContextStore,
) -> tuple[bool, list[ConditionEvaluation]]:
    """Evaluate every condition (no short-circuit) for diagnostics."""
    evaluations = [evaluate_condition(c, store) for c in conditions]
    return all(e.met for e in evaluations), evaluations


def evaluate_conditions(conditions: list[Condition], store: ContextStore) -> bool:
    """All conditions must hold. An empty list always holds."""
    return all(evaluate_condition(c, store).met for c in conditions)
