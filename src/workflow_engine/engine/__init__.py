"""Workflow engine components.

Provides:
- Settings loaded from .env
- Structured logging
- The definition validator and transition engine
- Definition/instance stores and the service facade over them
- A small CLI surface
"""
