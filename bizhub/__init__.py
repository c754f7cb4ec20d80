"""
BizHub Directory Core

Data layer for a business-management back office: fetches associates,
customers, people, organizations and jobs for the signed-in principal and
normalizes the raw rows into stable view-models for the UI.
"""

__version__ = "0.1.0"
