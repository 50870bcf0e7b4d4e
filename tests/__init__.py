"""Test suite for the formstate engine.

This package contains tests for:
- Configuration loading and normalization
- Snapshots and diagnostic precedence
- The edit pipeline (transform and message passes)
- Engine lifecycle, reentrancy and failure handling
- Settle notifications
- JSON Schema backed message rules
- End-to-end form scenarios
"""
