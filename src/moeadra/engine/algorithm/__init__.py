"""
MOEA/D algorithm: pluggable components and the iteration orchestrator.
"""
