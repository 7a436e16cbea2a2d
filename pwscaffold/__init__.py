"""Scaffold Playwright test-framework projects from templates.

Usage::

    playwright-test-framework-generator init my-tests --preset api -y
    python -m pwscaffold init my-tests
"""

__version__ = "1.0.0"
