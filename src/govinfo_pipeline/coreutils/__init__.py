"""
Core Utilities

Shared plumbing used by every layer:
- Environment / configuration
- Logging setup
- HTTP session, retry policy and response cache
"""
