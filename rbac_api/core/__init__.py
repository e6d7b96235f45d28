"""
Core building blocks: configuration, errors, logging, hooks and authorization.
"""
