"""
Core business logic modules for RepoPrep

Contains:
- Interview Pipeline: creation, answering and statistics operations
- Grounding: repository document/metadata retrieval
- Question Generation: AI questions with a paragraph fallback
- Response Evaluator: bounded scoring with a degraded policy
- Statistics Aggregator: interview and account rollups
"""

from src.core.interview_pipeline import InterviewPipeline
from src.core.generative_client import GenerativeClient
from src.core.grounding import GroundingTextRetriever
from src.core.question_generator import QuestionGenerationService
from src.core.response_evaluator import ResponseEvaluator
from src.core.statistics import StatisticsAggregator
from src.core.store import InMemoryInterviewStore, InterviewStore

__all__ = [
    "InterviewPipeline",
    "GenerativeClient",
    "GroundingTextRetriever",
    "QuestionGenerationService",
    "ResponseEvaluator",
    "StatisticsAggregator",
    "InMemoryInterviewStore",
    "InterviewStore",
]
