"""
ReelPick movie suggestion service.

This package contains the suggestion engine, the catalog and preference
database layer, the OMDb enrichment client, the REST API and a Streamlit UI.
"""

__version__ = "1.0.0"
