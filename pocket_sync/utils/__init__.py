"""
Utilities Module

Logging setup and local file helpers.

Author: pocket_sync Project
License: MIT
"""
