# demo/__init__.py
"""Demo page with one single-value and one form handler."""

from .pages import DemoPage, create_demo_app


__all__ = ["DemoPage", "create_demo_app"]
