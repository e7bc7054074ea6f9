"""
Shared schemas and utilities for the account service
"""
