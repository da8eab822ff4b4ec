"""Use-case level logic.

These modules implement the working-day calculations using data returned by
integrations (public holidays).

They should be:
- deterministic
- unit-testable
- free of web/framework code
"""
