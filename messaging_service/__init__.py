"""
Messaging service: user accounts, bearer tokens and direct messages.
"""

__version__ = "1.0.0"
