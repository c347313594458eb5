"""Core synchronization engine.

CRITICAL: Modules in this package must have NO GUI or web framework
dependencies.
"""
