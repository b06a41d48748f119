"""
commitgate

Configuration-driven pre-commit verification pipeline.
"""

__version__ = "1.0.0"
