"""
Facility complaint portal backend.

Multi-role service for submitting, tracking and resolving facility
complaints (student, staff, supervisor, maintenance and admin users).
"""

__version__ = "1.0.0"
