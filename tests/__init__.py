"""
Test suite for the TaskFlow application.

This package contains:
- unit/: pure logic tests (models, form checks, store, session gate, HTTP client)
- integration/: page flows driven through the Flask test client
- fakes.py: in-memory stand-in for the hosted auth/data backend
"""
