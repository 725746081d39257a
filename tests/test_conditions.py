"""Tests for @dependsOn / @if / @if-not evaluation."""

import pytest

from httprunner.conditions import (
    check_dependency,
    evaluate_condition,
    evaluate_conditions,
    evaluate_conditions_verbose,
)
from httprunner.context import ContextStore
from httprunner.models import HttpRequest
from httprunner.parser import parse_condition
from tests.conftest import make_http_result


@pytest.fixture
def store():
    s = ContextStore()
    s.record(
        HttpRequest("POST", "https://e.com/users", name="create"),
        make_http_result(201, body={"user": {"role": "admin", "active": True, "age": 30}}),
        1,
    )
    s.record(HttpRequest("GET", "https://e.com/broken", name="broken"), make_http_result(500, body="oops"), 2)
    s.record(HttpRequest("GET", "https://e.com/skipped", name="skipped"), None, 3)
    s.record(HttpRequest("HEAD", "https://e.com/empty", name="empty"), make_http_result(204, body=None), 4)
    return s


class TestCheckDependency:
    def test_no_dependency(self, store):
        assert check_dependency(None, store)
        assert check_dependency("", store)

    def test_succeeded_dependency(self, store):
        assert check_dependency("create", store)

    def test_failed_dependency(self, store):
        assert not check_dependency("broken", store)

    def test_skipped_dependency(self, store):
        assert not check_dependency("skipped", store)

    def test_unknown_dependency(self, store):
        assert not check_dependency("never-ran", store)


class TestEvaluateCondition:
    @pytest.mark.parametrize(
        "text,negate,met",
        [
            ("create.response.status 201", False, True),
            ("create.response.status 200", False, False),
            ("create.response.status 200", True, True),
            ("create.response.status 201", True, False),
            ("create.response.body.$.user.role admin", False, True),
            ("create.response.body.$.user.role guest", True, True),
            ("create.response.body.$.user.active true", False, True),
            ("create.response.body.$.user.age 30", False, True),
        ],
    )
    def test_status_and_body(self, store, text, negate, met):
        assert evaluate_condition(parse_condition(text, negate), store).met is met

    def test_missing_path_reports_not_found(self, store):
        evaluation = evaluate_condition(parse_condition("create.response.body.$.nope x"), store)
        assert not evaluation.met
        assert evaluation.actual_value == "<not found>"

    def test_missing_path_negated_is_met(self, store):
        assert evaluate_condition(parse_condition("create.response.body.$.nope x", negate=True), store).met

    def test_no_body(self, store):
        evaluation = evaluate_condition(parse_condition("empty.response.body.$.a b"), store)
        assert not evaluation.met
        assert evaluation.actual_value == "<no body>"

    @pytest.mark.parametrize("negate", [False, True])
    def test_unexecuted_reference_never_met(self, store, negate):
        assert not evaluate_condition(parse_condition("skipped.response.status 200", negate), store).met
        assert not evaluate_condition(parse_condition("unknown.response.status 200", negate), store).met

    def test_actual_value_reported(self, store):
        evaluation = evaluate_condition(parse_condition("broken.response.status 200"), store)
        assert evaluation.actual_value == "500"


class TestEvaluateConditions:
    def test_empty_list_holds(self, store):
        assert evaluate_conditions([], store)

    def test_all_must_hold(self, store):
        conditions = [
            parse_condition("create.response.status 201"),
            parse_condition("broken.response.status 500"),
        ]
        assert evaluate_conditions(conditions, store)
        conditions.append(parse_condition("broken.response.status 500", negate=True))
        assert not evaluate_conditions(conditions, store)

    def test_verbose_evaluates_everything(self, store):
        conditions = [
            parse_condition("create.response.status 500"),
            parse_condition("create.response.status 201"),
        ]
        met, evaluations = evaluate_conditions_verbose(conditions, store)
        assert not met
        assert [e.met for e in evaluations] == [False, True]
