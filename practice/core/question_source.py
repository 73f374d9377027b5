import logging
from typing import Any, Dict, List, Protocol

from practice.core.models import JobContext, Question
from practice.system.exceptions import QuestionSourceError

logger = logging.getLogger(__name__)

KNOWN_SKILLS = [
    "JavaScript",
    "React",
    "TypeScript",
    "Node.js",
    "Python",
    "SQL",
    "Communication",
    "Leadership",
]


class QuestionBank(Protocol):
    async def get_questions(self, category: str | None = None) -> List[Dict[str, Any]]:
        ...


class QuestionGenerator(Protocol):
    async def generate_questions(self, job_title: str, skills: List[str]) -> Dict[str, Any]:
        ...


def extract_skills(job_description: str) -> List[str]:
    lowered = job_description.lower()
    return [skill for skill in KNOWN_SKILLS if skill.lower() in lowered]


def _to_question(raw: Dict[str, Any]) -> Question:
    question: Question = {
        "question": str(raw.get("question", "")),
        "description": str(raw.get("description") or ""),
    }
    if raw.get("suggestedAnswer"):
        question["suggestedAnswer"] = str(raw["suggestedAnswer"])
    return question


class QuestionSource:
    """Loads the question list for one practice session."""

    def __init__(self, bank: QuestionBank, generator: QuestionGenerator | None = None):
        self.bank = bank
        self.generator = generator or bank

    async def load(self, job: JobContext | None = None, category: str | None = None) -> List[Question]:
        try:
            if not job:
                bank = await self.bank.get_questions(category)
                raw_questions = list(bank or [])
            else:
                skills = extract_skills(job.get("jobDescription") or "")
                logger.info(f"Generating questions for '{job.get('position')}' (skills: {skills})")
                generated = await self.generator.generate_questions(job.get("position", ""), skills)
                generated = generated or {}
                raw_questions = list(generated.get("behavioral") or []) + list(generated.get("technical") or [])
        except QuestionSourceError:
            raise
        except Exception as e:
            logger.error(f"Failed to load practice questions: {e}")
            raise QuestionSourceError(f"Failed to load interview questions: {e}") from e

        questions = [_to_question(q) for q in raw_questions if isinstance(q, dict) and q.get("question")]
        if not questions:
            raise QuestionSourceError("No interview questions are available for this session")
        return questions
