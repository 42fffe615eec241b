"""Core application components.

This module provides the foundational components for the organization API:
- Supabase client lifecycle and the database dependency
- Application settings and configuration
- Logging setup and request-tracing middleware
"""
