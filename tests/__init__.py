"""Test suite for cert-irregularity.

This package contains tests for all modules:
- test_matching: Normalization and similarity scoring
- test_models: Pydantic models and the input boundary
- test_classifier: The four-pass classifier
- test_ranking: Filtering, counts and view-local edits
- test_planning: Standardization, consolidation and merge plans
- test_scheduler / test_session: Review orchestration
- test_retry: Source-read retry policy
- test_reporting / test_cli: Markdown report and certscan CLI
"""
