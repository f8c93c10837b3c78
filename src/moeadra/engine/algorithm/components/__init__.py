"""
MOEA/D collaborators: every strategy the orchestrator dispatches to by name.
"""
