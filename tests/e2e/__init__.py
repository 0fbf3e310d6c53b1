"""
E2E test package for the TodoMVC conformance suite.

This package contains Playwright-based browser tests and demonstrates:
- Page Object Model (POM) pattern
- Oracle-driven conformance scenarios
- Waiting on application storage instead of fixed sleeps
"""
