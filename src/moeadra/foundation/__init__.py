"""
Foundation layer: errors, logging, registries, constraints, evaluation and problems.
"""
