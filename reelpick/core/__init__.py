"""
Core recommendation logic, independent of the web layer.
"""
