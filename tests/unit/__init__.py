"""Unit tests for individual components in isolation.

Coverage:
    - relay/: Config validation, history conversion and chunk filtering
    - ui/: Stream parsing, session state machine and markdown rendering
    - store/: Firestore chat records with a mocked client
    - auth/: Credential loading and ID token verification

Uses mocks for external services. Leverages pytest-check for multiple
assertions per test.
"""
