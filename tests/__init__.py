"""
Test suite for the TodoMVC conformance oracle.

This package contains:
- unit/: Oracle, runner, harness and helper tests (no browser)
- e2e/: Browser tests against a live TodoMVC app using Playwright
- mocks/: In-memory fake TodoMVC app used by the unit tests
"""
