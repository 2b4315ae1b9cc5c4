"""
Jira and GitHub connectors for a host query engine, with conservative
predicate pushdown and paginated fetching.
"""

__version__ = "1.0.0"
