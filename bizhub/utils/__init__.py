"""
Utilities package for BizHub: settings, logging and database access.
"""
