"""
Infrastructure Layer
Database and observability
"""
