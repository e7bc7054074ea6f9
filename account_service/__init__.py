"""
Account Service
Login, signup and profile management backed by Supabase
"""

__version__ = "1.0.0"
