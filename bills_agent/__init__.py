"""
Bills Agent - Source Package

A small household-bills tracker: bill definitions and per-month paid
status kept in a local JSON file, a REST API over them, a Streamlit
dashboard, and a chat assistant that answers questions about the month.

DESIGN PRINCIPLES:
1. The JSON file is the only source of truth
2. Fail early, fail visibly
3. The assistant only ever sees numbers we computed
4. Every mutation is audited
"""

__version__ = "1.0.0"
__author__ = "Bills Agent Team"
