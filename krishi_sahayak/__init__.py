"""
Krishi Sahayak

Client state layer and backend services for the Krishi Sahayak farming
advisory application.
"""

__version__ = "1.0.0"
