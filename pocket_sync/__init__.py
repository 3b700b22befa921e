"""
pocket_sync

Save file reconciliation between an Analogue Pocket SD card and a MiSTer
reached over SFTP.

Author: pocket_sync Project
License: MIT
"""

__version__ = "0.1.0"
