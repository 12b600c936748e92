"""
Extract Layer - Pure I/O to the govInfo API

This layer handles all external data fetching with no business logic.
- No imports from transform or load layers
- Returns raw records (plain dicts) and validated response envelopes
- Handles retries, pagination and response validation
"""
