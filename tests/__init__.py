# =============================================================================
# tests/ - Test Suite
# =============================================================================
# - test_config.py: Settings resolution from environment and defaults
# - test_connectors.py: MongoDB / Redis connectors and the session store
# - test_bootstrap.py: Connection policy, pipeline order, listen behaviour
# - test_middleware.py: Body parsing, cookies, favicon, sessions
# - test_app.py: End-to-end requests through the full app
#
# Run tests with: pytest
# =============================================================================
