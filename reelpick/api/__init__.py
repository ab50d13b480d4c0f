"""
REST API for ReelPick (FastAPI).
"""
