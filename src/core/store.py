"""
Interview storage for RepoPrep

Persistence is an external collaborator; the pipeline only depends on the
InterviewStore protocol. InMemoryInterviewStore keeps everything in dicts
(in-memory for now, a database-backed store in production).
"""

from typing import Protocol

from src.models.evaluation import Answer
from src.models.interview import Interview
from src.models.question import Question


class InterviewStore(Protocol):
    """Storage operations the pipeline relies on."""

    async def save_interview(self, interview: Interview) -> None: ...

    async def get_interview(self, interview_id: str) -> Interview | None: ...

    async def list_interviews(self, account_id: str) -> list[Interview]: ...

    async def delete_interview(self, interview_id: str) -> bool: ...

    async def save_questions(self, questions: list[Question]) -> None: ...

    async def get_question(self, question_id: str) -> Question | None: ...

    async def list_questions(self, interview_id: str) -> list[Question]: ...

    async def save_answer(self, answer: Answer) -> None: ...

    async def get_answer(self, answer_id: str) -> Answer | None: ...

    async def list_answers(self, interview_id: str) -> list[Answer]: ...

    async def create_interview(self, interview: Interview, questions: list[Question]) -> None: ...


class InMemoryInterviewStore:
    """Dict-backed store. Lists come back in insertion/presentation order."""

    def __init__(self):
        self._interviews: dict[str, Interview] = {}
        self._questions: dict[str, Question] = {}
        self._answers: dict[str, Answer] = {}

    # =========================================================================
    # INTERVIEWS
    # =========================================================================

    async def create_interview(self, interview: Interview, questions: list[Question]) -> None:
        """Store an interview together with its questions in one step."""
        for question in questions:
            if question.interview_id != interview.id:
                raise ValueError(f"Question {question.id} does not belong to interview {interview.id}")
        self._interviews[interview.id] = interview
        for question in questions:
            self._questions[question.id] = question

    async def save_interview(self, interview: Interview) -> None:
        self._interviews[interview.id] = interview

    async def get_interview(self, interview_id: str) -> Interview | None:
        return self._interviews.get(interview_id)

    async def list_interviews(self, account_id: str) -> list[Interview]:
        return [i for i in self._interviews.values() if i.account_id == account_id]

    async def delete_interview(self, interview_id: str) -> bool:
        """Delete an interview and everything it owns."""
        if self._interviews.pop(interview_id, None) is None:
            return False
        self._questions = {k: q for k, q in self._questions.items() if q.interview_id != interview_id}
        self._answers = {k: a for k, a in self._answers.items() if a.interview_id != interview_id}
        return True

    # =========================================================================
    # QUESTIONS & ANSWERS
    # =========================================================================

    async def save_questions(self, questions: list[Question]) -> None:
        for question in questions:
            self._questions[question.id] = question

    async def get_question(self, question_id: str) -> Question | None:
        return self._questions.get(question_id)

    async def list_questions(self, interview_id: str) -> list[Question]:
        questions = [q for q in self._questions.values() if q.interview_id == interview_id]
        return sorted(questions, key=lambda q: q.order)

    async def save_answer(self, answer: Answer) -> None:
        self._answers[answer.id] = answer

    async def get_answer(self, answer_id: str) -> Answer | None:
        return self._answers.get(answer_id)

    async def list_answers(self, interview_id: str) -> list[Answer]:
        return [a for a in self._answers.values() if a.interview_id == interview_id]
