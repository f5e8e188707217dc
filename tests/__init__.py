"""
Test suite for the stock return-distribution service.

Contains:
- tests/unit/ : Unit tests for domain, use-cases, adapters and entrypoints
"""
