"""
Log Keeper - retention for dated log files.

Compresses, uploads and expires daily logs across a local and a remote store
based on file age.
"""

try:
    from importlib.metadata import version

    __version__ = version("logkeeper")
except Exception:
    __version__ = "0.0.0"  # Fallback for development
