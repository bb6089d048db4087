"""Domain layer for TaskNest.

Subpackages:
    shared - Result type and small helpers
    task - The task tree model, colours, traversal and channel operations
"""
