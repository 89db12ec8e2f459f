"""Utility modules for vdoclsp."""
