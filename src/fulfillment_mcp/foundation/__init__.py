"""Foundation - Core building blocks.

Contains: error taxonomy, configuration, schema validation, tool
abstractions and the tool registry.
"""
