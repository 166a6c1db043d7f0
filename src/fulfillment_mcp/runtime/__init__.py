"""Runtime - Execution control and monitoring.

Contains: timeout guard, retry policy, health/metrics aggregation, logging.
"""
