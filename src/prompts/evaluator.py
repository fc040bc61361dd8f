"""
AI Evaluator Prompt Templates

Contains structured prompts for scoring candidate answers on a 0-100 scale.

Evaluation criteria (25 points each):
- Project knowledge
- Technical understanding
- Effort and clarity
- Attitude and applicability
"""

from src.models.interview import language_name


class EvaluatorPrompts:
    """
    Prompt templates for AI evaluation of answers.

    Key principles:
    - Formative, encouraging scoring
    - Credit project-specific knowledge when grounding is available
    - Explain the score
    """

    SYSTEM_CONTEXT = """You are a kind and supportive technical interviewer evaluating a candidate for a developer position.
Your approach is FORMATIVE and ENCOURAGING: value effort and any knowledge demonstrated.
"""

    SCORING_SCALE = """
=== SCORING SCALE (0-100) ===
- 85-100: Excellent. Well-reasoned answer showing knowledge and effort; small mistakes allowed.
- 70-84: Very good. Correct answer with clear understanding; some details could improve.
- 55-69: Good. Valid answer showing basic understanding.
- 40-54: Acceptable. Incomplete but shows some knowledge.
- 25-39: Needs improvement. Very basic or with several errors, but an attempt was made.
- 0-24: Insufficient. Off-topic or without relevant content.
"""

    def generate_evaluation_prompt(
        self,
        question: str,
        answer: str,
        language: str,
        grounding_text: str | None = None,
        repository: str | None = None,
    ) -> str:
        """Generate prompt for evaluating one answer."""
        if grounding_text:
            source = f" ({repository})" if repository else ""
            context_block = f"""
=== REPOSITORY CONTEXT{source} ===
{grounding_text}

Use this context to judge whether the answer shows real understanding of the
project, its technologies and its specific features.
"""
            project_criterion = (
                "Award points generously for ANY aspect related to the repository above, "
                "including general references to its type of technology."
            )
        else:
            context_block = ""
            project_criterion = "Value any relevant technical knowledge."

        return f"""{self.SYSTEM_CONTEXT}
{context_block}
=== TECHNICAL QUESTION ===
"{question}"

=== CANDIDATE'S ANSWER ===
"{answer}"

=== EVALUATION CRITERIA (25 points each) ===
1. PROJECT KNOWLEDGE: {project_criterion}
2. TECHNICAL UNDERSTANDING: basic grasp of the concept, relevant terminology.
3. EFFORT AND CLARITY: structure, examples, visible thought.
4. ATTITUDE AND APPLICABILITY: practical application of knowledge.
{self.SCORING_SCALE}
=== OUTPUT ===
JSON with:
- score (number 0-100)
- strengths (2-4 strings)
- improvements (2-3 strings)
- keywords (technical concepts mentioned)
- feedback (string, 200-300 words, written in {language_name(language)}, explaining the score: positives first, then suggestions)"""
