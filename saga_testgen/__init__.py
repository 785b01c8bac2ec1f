"""
Scenario generator for effect-generator ("saga") functions.

This package provides a framework to:
- parse a Python module and find its exported sagas and selects
- trace every control-flow path through each saga
- re-render the effects each path yields as source text
- write one pytest scenario per path
"""

__all__ = [
    "cli",
    "config",
    "declaration_collector",
    "exceptions",
    "file_tree",
    "frontend",
    "generator",
    "models",
    "path_tracer",
    "renderer",
    "scenario_assembler",
]
