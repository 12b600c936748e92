"""
Load Layer - Data Persistence

This layer handles all data persistence operations.
- Local file storage (CSV tables, plain-text documents)
- No business logic, just I/O operations
"""
