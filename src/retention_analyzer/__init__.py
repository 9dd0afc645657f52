"""Dependency Retention Analyzer.

Decides per build module whether a legacy runtime dependency can be dropped
after a framework migration.
"""

__version__ = "0.1.0"
