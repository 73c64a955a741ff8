"""
Core infrastructure: logging, exceptions, middleware and security.
"""
