"""
Domain services package.
"""
