"""Shared utilities and cross-domain components.

This module contains utilities used across multiple domains:
- Exception classes and handlers for consistent error responses
- Permission system and authorization gate for role-based access control
"""
