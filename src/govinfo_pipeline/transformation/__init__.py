"""
Transformation Layer - Pure Data Transformations

This layer turns raw API records into tables and documents.
- No API calls, no file I/O
- Records -> Polars DataFrames with stable column order
- Downloaded HTML -> plain text
"""
