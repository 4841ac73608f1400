"""
Enrollment Pricing Package

Quote engine for tutoring session packages.
Resolves package pricing using Level → Package Discount → Promo pipeline with default-level fallback.
"""

__version__ = "1.0.0"
