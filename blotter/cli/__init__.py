"""
CLI module - click command groups for database and case administration.
"""
