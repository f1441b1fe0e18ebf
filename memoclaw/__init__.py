"""
MemoClaw - Memory-as-a-Service command-line client for AI agents.

Wallet-authenticated access to the MemoClaw memory API.
"""

try:
    from importlib.metadata import version

    __version__ = version("memoclaw")
except Exception:
    __version__ = "0.0.0"

__all__ = ["__version__"]
