"""
Experiment layer: result container and the ``moeadra`` command line.
"""
