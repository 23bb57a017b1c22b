"""
textload: bulk ingestion of delimited and fixed-width text into typed records.
"""

__version__ = "0.1.0"
