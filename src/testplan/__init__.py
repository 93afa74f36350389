"""
TestPlan - test-plan generation for parameterized test suites.

This package provides tools to:
- Expand generator fixtures into a matrix of run configurations
- Group runs by worker-scoped fixture compatibility
- Filter declarations by title (grep) and exclusivity (only)
- Project the surviving declarations into an execution tree
"""

__version__ = "0.1.0"
__author__ = "TestPlan Team"
