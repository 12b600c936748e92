"""
Orchestration Layer - Workflow Coordination

Wires extract -> transform -> load for each pipeline run.
- No business logic of its own
- Logs progress and re-raises failures
"""
