"""
Validate the approval rule table

Prints every edge and forward shortcut, then the problems found (edges out of
terminal statuses, roles not entitled at the source status, shadowed rules).
Exits non-zero when problems exist.

Run: python -m scripts.validate_rules
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from procureflow.engine.rule_table import RuleTable
from procureflow.engine.authorization_gate import AuthorizationGate
from procureflow.domain.enums import RequestStatus


def print_table(table: RuleTable, gate: AuthorizationGate) -> None:
    print("=" * 60)
    print(f"RULE TABLE ({len(table)} rules)")
    print("=" * 60)

    for status in RequestStatus:
        rules = table.outgoing(status)
        approvers = sorted(r.value for r in gate.required_approvers(status))
        print(f"\n{status.value}  [approvers: {', '.join(approvers) or '-'}]")
        if not rules:
            print("   (no outgoing approve edges)")
        for rule in rules:
            condition = ""
            if rule.is_conditional:
                parts = [f"{c.field}={c.value}" for c in rule.condition.conditions]
                condition = f" when {f' {rule.condition.logic} '.join(parts)}"
            print(f"   {rule.required_role.value:<20} -> {rule.to_status.value}{condition}")

    print("\n" + "=" * 60)
    print("FORWARD SHORTCUTS")
    print("=" * 60)
    for (status, role), target in table.forward_shortcuts.items():
        print(f"   {status.value} / {role.value} -> {target.value}")


def main() -> int:
    table = RuleTable()
    gate = AuthorizationGate()

    print_table(table, gate)

    issues = table.validate(gate)
    print()
    if issues:
        print(f"❌ {len(issues)} problem(s):")
        for issue in issues:
            print(f"   • {issue}")
        return 1

    print("✅ Rule table is consistent")
    return 0


if __name__ == "__main__":
    sys.exit(main())
