"""
Test Suite

Tests for the ProcureFlow purchase request approval service.

Structure:
    tests/
    ├── __init__.py         # This file
    ├── conftest.py         # Pytest fixtures (mongomock-backed service, API client)
    ├── unit/               # Unit tests
    │   ├── test_engine/    # Rule table, routing, authorization, coordinator
    │   ├── test_services/  # Request service CRUD and listing
    │   ├── test_repositories/ # Indexes and stored document shape
    │   └── test_utils/     # Tokens and time helpers
    └── integration/        # Integration tests
        └── test_api/       # API endpoint tests

To run tests:
    pytest tests/
    pytest tests/unit/
    pytest tests/integration/
"""
