"""
API endpoint modules for RepoPrep
"""

from src.api.endpoints import interview, responses, stats, metadata

__all__ = ["interview", "responses", "stats", "metadata"]
