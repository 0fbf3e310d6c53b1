"""
Fakes for the TodoMVC conformance suite.

This package provides an in-memory TodoMVC app that implements the
harness capability surface so that:
- The runner can be tested without a browser
- Application defects can be injected on demand
- Waits run on a virtual clock and never sleep
"""
