"""
AI Interviewer Prompt Templates

Contains structured prompts for generating repository-grounded technical
interview questions.

Designed to make the AI behave like a real human interviewer who has read
the project, not a trivia generator.
"""

from src.core.difficulty import difficulty_label
from src.models.interview import language_name


class InterviewerPrompts:
    """
    Prompt templates for question generation.

    Key principles:
    - Questions are specific to the repository
    - Mix of conceptual, practical, design and implementation questions
    - Difficulty and language are hints, not hard constraints
    """

    SYSTEM_CONTEXT = """You are a senior technical interviewer with extensive experience.
You have reviewed a source-code repository and need to ask intelligent,
technical questions that make sense for it.

You are NOT a chatbot. You are simulating a real interview experience.
"""

    QUESTION_CHARACTERISTICS = """
QUESTION CHARACTERISTICS:
- Specific to the project (mention technologies, features or concepts from the text)
- Phrased the way a real interviewer would ask
- Test deep understanding, not memorization
- Mix of conceptual, practical, design and implementation questions
- Vary difficulty: some easy, some medium, some hard
"""

    def generate_question_prompt(
        self,
        grounding_text: str,
        count: int,
        difficulty: str,
        language: str,
        repository: str | None = None,
    ) -> str:
        """Generate prompt for creating a batch of repository questions."""
        repository_line = f"REPOSITORY ANALYZED: {repository}\n" if repository else ""

        return f"""{self.SYSTEM_CONTEXT}
{repository_line}
=== REPOSITORY INFORMATION ===
{grounding_text}

=== YOUR TASK ===
Generate exactly {count} technical questions in {language_name(language)} that show whether the candidate really understands:

1. The main functionality of the project
2. The technologies and frameworks it uses
3. Architecture and design decisions
4. Problems it solves and how it solves them
5. Specific technical aspects mentioned in the information above

DIFFICULTY LEVEL: {difficulty_label(difficulty)}
{self.QUESTION_CHARACTERISTICS}
OUTPUT FORMAT: JSON object {{"questions": [{{"question": string, "difficulty": "easy|medium|hard"}}]}}"""


# Templates for the degraded path: one question per document paragraph.
PARAGRAPH_QUESTION_TEMPLATES = (
    'The project documentation says: "{excerpt}". Explain what this means and how the project implements it.',
    'Consider this part of the documentation: "{excerpt}". What design decisions does it imply?',
    'Based on "{excerpt}", what problems could appear in production and how would you address them?',
)
