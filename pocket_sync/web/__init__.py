"""
Web Module

FastAPI presentation layer.

Author: pocket_sync Project
License: MIT
"""
