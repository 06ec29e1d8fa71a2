"""
Core infrastructure: configuration, persistence, cache, security and logging.
"""
