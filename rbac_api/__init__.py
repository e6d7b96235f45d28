"""
RBAC API - role-based access control with transactional identity workflows.
"""

__version__ = "0.1.0"
