"""
Core utilities for TenantDock.
"""
