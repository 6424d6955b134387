"""
Core architecture components for the marketplace backend
"""
