"""Tests for rule condition evaluation"""

import pytest

from procureflow.domain.enums import ConditionOperator as Op
from procureflow.domain.models import Condition, ConditionGroup
from procureflow.engine.condition_evaluator import ConditionEvaluator


@pytest.fixture
def evaluator():
    return ConditionEvaluator()


def group(*conditions, logic="AND"):
    return ConditionGroup(logic=logic, conditions=[Condition(field=f, operator=op, value=v) for f, op, v in conditions])


class TestEvaluate:
    def test_empty_group_is_true(self, evaluator):
        assert evaluator.evaluate(ConditionGroup(), {})

    def test_boolean_equality_is_strict(self, evaluator):
        cond = group(("budget_available", Op.EQUALS, False))
        assert evaluator.evaluate(cond, {"budget_available": False})
        assert not evaluator.evaluate(cond, {"budget_available": None})
        assert not evaluator.evaluate(cond, {"budget_available": 0})
        assert not evaluator.evaluate(cond, {})

    def test_and_or_logic(self, evaluator):
        conds = [("budget_available", Op.EQUALS, False), ("direct_to_chairman", Op.EQUALS, True)]
        ctx = {"budget_available": False, "direct_to_chairman": False}
        assert not evaluator.evaluate(group(*conds), ctx)
        assert evaluator.evaluate(group(*conds, logic="OR"), ctx)

    def test_dot_path_lookup(self, evaluator):
        cond = group(("request.cost_estimate", Op.GREATER_THAN, 1000))
        assert evaluator.evaluate(cond, {"request": {"cost_estimate": 2500}})
        assert not evaluator.evaluate(cond, {"request": "flat"})

    def test_numeric_comparison_fails_closed(self, evaluator):
        cond = group(("cost_estimate", Op.LESS_THAN, 1000))
        assert evaluator.evaluate(cond, {"cost_estimate": "500"})
        assert not evaluator.evaluate(cond, {"cost_estimate": "n/a"})
        assert not evaluator.evaluate(cond, {})

    def test_membership_and_emptiness(self, evaluator):
        assert evaluator.evaluate(group(("college", Op.IN, ["Arts", "Science"])), {"college": "Arts"})
        assert evaluator.evaluate(group(("college", Op.NOT_IN, "Arts")), {"college": "Science"})
        assert evaluator.evaluate(group(("notes", Op.IS_EMPTY, None)), {"notes": ""})
        assert evaluator.evaluate(group(("notes", Op.IS_NOT_EMPTY, None)), {"notes": "ok"})
