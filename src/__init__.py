"""
RepoPrep - Repository-Grounded Mock Interview Platform

Generates technical interview questions from a code repository's README
(or its metadata), scores free-text answers with an AI evaluator, and
tracks progress across interviews.
"""

__version__ = "0.1.0"
__author__ = "RepoPrep Team"
