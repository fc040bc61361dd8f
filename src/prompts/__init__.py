"""
AI prompt templates for RepoPrep

Contains structured prompts for:
- Repository-grounded question generation
- Answer evaluation
"""

from src.prompts.interviewer import InterviewerPrompts
from src.prompts.evaluator import EvaluatorPrompts

__all__ = [
    "InterviewerPrompts",
    "EvaluatorPrompts",
]
