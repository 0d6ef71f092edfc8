"""Approval routing engine"""
from .rule_table import RuleTable, DEFAULT_RULES, DEFAULT_FORWARD_SHORTCUTS
from .route_resolver import RouteResolver
from .authorization_gate import AuthorizationGate
from .condition_evaluator import ConditionEvaluator
from .coordinator import TransitionCoordinator
from .audit_writer import AuditWriter
from .progress import progress, CANONICAL_PATH

__all__ = [
    "RuleTable",
    "DEFAULT_RULES",
    "DEFAULT_FORWARD_SHORTCUTS",
    "RouteResolver",
    "AuthorizationGate",
    "ConditionEvaluator",
    "TransitionCoordinator",
    "AuditWriter",
    "progress",
    "CANONICAL_PATH",
]
