# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the ProgramHub API:
# - test_votes.py, test_feedback_tree.py: pure vote and tree rules
# - test_cascade_delete.py, test_feedback_service.py: feedback on the fake store
# - test_moderation.py, test_listing.py: moderation and ordered listings
# - test_api_*.py, test_auth.py, test_health.py: endpoints via TestClient
#
# Run tests with: pytest
# =============================================================================
