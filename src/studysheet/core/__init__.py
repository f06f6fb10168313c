"""
Core package: immutable input models shared by every layout component,
plus JSON serialization helpers for collaborators.
"""
