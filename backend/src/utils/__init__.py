"""
Utility modules for the clinic booking backend.

This package contains shared utility functions and helpers used across
the application, including calendar date utilities, CPF and phone
validation, the time zone catalog, and appointment query helpers.
"""

from utils.appointment_queries import filter_active_appointments

__all__ = ['filter_active_appointments']
