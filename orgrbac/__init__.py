"""Organization, team and member management behind role-based access control."""

__version__ = "0.1.0"
