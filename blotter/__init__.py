"""
Barangay blotter case service.
"""

__version__ = "0.1.0"
