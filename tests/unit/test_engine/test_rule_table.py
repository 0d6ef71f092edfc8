"""Tests for the approval rule table"""

from procureflow.domain.enums import RequestStatus as S, UserRole as R
from procureflow.engine.rule_table import (
    RuleTable, DEFAULT_RULES, DEFAULT_FORWARD_SHORTCUTS, edge, when
)
from procureflow.engine.authorization_gate import AuthorizationGate


class TestDefaultTable:
    def test_default_table_is_consistent(self):
        assert RuleTable().validate(AuthorizationGate()) == []

    def test_no_edges_leave_terminal_statuses(self):
        table = RuleTable()
        assert table.outgoing(S.APPROVED) == []
        assert table.outgoing(S.REJECTED) == []

    def test_every_open_status_has_an_approve_edge(self):
        table = RuleTable()
        for status in S:
            if status.is_terminal:
                continue
            assert table.outgoing(status), status

    def test_conditional_chairman_edge_precedes_fallback(self):
        candidates = RuleTable().candidates(S.DEAN_REVIEW, R.DEAN)
        assert [c.to_status for c in candidates] == [S.CHAIRMAN_APPROVAL, S.DEPARTMENT_CHECKS]
        assert candidates[0].is_conditional
        assert not candidates[1].is_conditional

    def test_institution_verified_branches_on_budget(self):
        candidates = RuleTable().candidates(S.INSTITUTION_VERIFIED, R.INSTITUTION_MANAGER)
        assert {c.to_status for c in candidates} == {S.VP_APPROVAL, S.DEAN_REVIEW}
        assert all(c.is_conditional for c in candidates)

    def test_any_department_clears_department_checks(self):
        table = RuleTable()
        for role in (R.MMA, R.HR, R.AUDIT, R.IT):
            targets = [c.to_status for c in table.candidates(S.DEPARTMENT_CHECKS, role)]
            assert targets == [S.DEAN_VERIFICATION]

    def test_candidates_for_unrelated_role_are_empty(self):
        assert RuleTable().candidates(S.VP_APPROVAL, R.DEAN) == []

    def test_forward_shortcuts(self):
        table = RuleTable()
        assert table.forward_target(S.MANAGER_REVIEW, R.INSTITUTION_MANAGER) == S.VP_APPROVAL
        assert table.forward_target(S.DEAN_VERIFICATION, R.DEAN) == S.CHIEF_DIRECTOR_APPROVAL
        assert table.forward_target(S.BUDGET_CHECK, R.ACCOUNTANT) is None
        assert table.forward_shortcuts == DEFAULT_FORWARD_SHORTCUTS

    def test_len_counts_expanded_rules(self):
        assert len(RuleTable()) == len(DEFAULT_RULES)


class TestValidate:
    def test_flags_edge_out_of_terminal_status(self):
        rules = DEFAULT_RULES + tuple(edge(S.APPROVED, S.REJECTED, [R.CHAIRMAN]))
        issues = RuleTable(rules).validate(AuthorizationGate())
        assert any("terminal" in issue for issue in issues)

    def test_flags_role_not_entitled_at_source(self):
        rules = tuple(edge(S.VP_APPROVAL, S.HOI_APPROVAL, [R.DEAN]))
        issues = RuleTable(rules, forward_shortcuts={}).validate(AuthorizationGate())
        assert len(issues) == 1
        assert "may not act on vp_approval" in issues[0]

    def test_flags_rule_shadowed_by_unconditional_rule(self):
        rules = tuple(
            edge(S.VP_APPROVAL, S.HOI_APPROVAL, [R.VP])
            + edge(S.VP_APPROVAL, S.DEAN_REVIEW, [R.VP], condition=when(budget_available=True))
        )
        issues = RuleTable(rules, forward_shortcuts={}).validate(AuthorizationGate())
        assert len(issues) == 1
        assert "shadowed" in issues[0]

    def test_flags_forward_shortcut_for_unentitled_role(self):
        shortcuts = {(S.VP_APPROVAL, R.CHAIRMAN): S.APPROVED}
        issues = RuleTable((), forward_shortcuts=shortcuts).validate(AuthorizationGate())
        assert issues and "forward shortcut" in issues[0]


class TestWhen:
    def test_builds_equality_conditions(self):
        group = when(budget_available=False, direct_to_chairman=True)
        assert group.logic == "AND"
        assert [(c.field, c.value) for c in group.conditions] == [
            ("budget_available", False), ("direct_to_chairman", True)
        ]
