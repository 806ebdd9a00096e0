"""
Points Tracker - Source Package

A monthly points ledger for a child's behavior and grades incentive program.

DESIGN PRINCIPLES:
1. Balance is always base points plus the sum of the entries
2. No change without the admin code
3. Fail early, fail visibly
4. Losing storage never loses the session
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Points Tracker Team"
