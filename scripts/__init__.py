"""
Backend Scripts Module

Operator utilities for the approval service.

Available scripts:
    - validate_rules.py: Checks the rule table against the approver mapping
    - issue_token.py: Mints a bearer token for local testing
    - seed_data.py: Creates sample purchase requests at various stages

Usage:
    python -m scripts.validate_rules
    python -m scripts.issue_token --role dean --email dean@college.edu
    python -m scripts.seed_data
"""
