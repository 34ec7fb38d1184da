"""
Core Package
Shared error types and error response helpers.
"""
