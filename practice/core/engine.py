import asyncio
import json
import logging
import re
import time
from typing import Any, Dict, List, TypedDict

from langgraph.graph import END, StateGraph
from mistralai import Mistral

from practice.config.settings import settings
from practice.core.feedback import normalize_analysis
from practice.core.models import AnswerAnalysis
from practice.core.prompts import ANSWER_COACH_PROMPT, QUESTION_WRITER_PROMPT, answer_prompt, questions_prompt
from practice.system.exceptions import AnalysisError

logger = logging.getLogger(__name__)

QUESTIONS_PER_CATEGORY = 3

EMPTY_ANSWER_ANALYSIS: AnswerAnalysis = {
    "feedback": (
        "You didn't provide an answer. Remember, even in practice, it's important to attempt "
        "a response to develop your skills."
    ),
    "clarity": 1,
    "relevance": 1,
    "overall": 1,
    "strengths": ["Attempted the interview practice exercise"],
    "areasForImprovement": [
        "Provide at least a basic answer to practice articulating your thoughts",
        "Try to address the core elements of the question",
        "Structure your thoughts, even if they're not perfect",
    ],
}


class AnalysisState(TypedDict):
    question: str
    answer: str
    job_title: str | None
    company_name: str | None
    raw: Dict[str, Any]
    analysis: AnswerAnalysis | None


class QuestionsState(TypedDict):
    job_title: str
    skills: List[str]
    raw: Dict[str, Any]
    behavioral: List[Dict[str, str]]
    technical: List[Dict[str, str]]


class CoachEngine:
    """
    Local answer-analysis and question-generation backend.

    Both operations run as small langgraph workflows over a Mistral chat
    model. Failures of the model or of its JSON raise AnalysisError; callers
    decide how to degrade.
    """

    def __init__(self, client: Any | None = None, model: str | None = None):
        self.client = client or Mistral(api_key=settings.MISTRAL_API_KEY)
        self.model = model or settings.MISTRAL_MODEL
        self.metrics: Dict[str, Any] = {
            "total_tokens": 0,
            "latencies": [],
            "avg_latency": 0,
        }
        self.analysis_graph = self._build_analysis_graph()
        self.questions_graph = self._build_questions_graph()

    # ========================================
    # LLM plumbing
    # ========================================

    @staticmethod
    def _parse_json_response(content: str) -> str | None:
        if "```json" in content:
            json_str = content.split("```json")[1].split("```")[0].strip()
        elif "```" in content:
            json_str = content.split("```")[1].split("```")[0].strip()
        else:
            json_str = content.strip()

        if not json_str.startswith("{"):
            start_idx = content.find("{")
            end_idx = content.rfind("}")
            if start_idx == -1 or end_idx <= start_idx:
                return None
            json_str = content[start_idx:end_idx + 1]
        return json_str

    def _extract_json(self, content: str | None) -> Dict[str, Any]:
        content = content or ""
        json_str = self._parse_json_response(content)
        if not json_str:
            raise AnalysisError(f"No JSON object in model response: {content[:200]!r}")
        try:
            return json.loads(json_str)
        except json.JSONDecodeError:
            cleaned = re.sub(r',\s*}', '}', json_str)
            cleaned = re.sub(r',\s*]', ']', cleaned)
            try:
                return json.loads(cleaned)
            except json.JSONDecodeError as e:
                raise AnalysisError(f"Malformed JSON in model response: {e}") from e

    def _update_metrics(self, usage: Any, latency: float) -> None:
        if usage is not None:
            self.metrics["total_tokens"] += (usage.prompt_tokens or 0) + (usage.completion_tokens or 0)
        self.metrics["latencies"].append(latency)
        self.metrics["avg_latency"] = sum(self.metrics["latencies"]) / len(self.metrics["latencies"])

    async def _call_llm_async(self, prompt: str, system_prompt: str) -> Dict[str, Any]:
        start_time = time.time()
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]
        try:
            response = await asyncio.to_thread(
                self.client.chat.complete,
                model=self.model,
                messages=messages,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise AnalysisError(f"Model request failed: {e}") from e

        latency = (time.time() - start_time) * 1000
        self._update_metrics(getattr(response, "usage", None), latency)
        logger.info(f"Model responded in {latency:.0f}ms")

        if not getattr(response, "choices", None):
            raise AnalysisError("Model returned no choices")
        return self._extract_json(response.choices[0].message.content)

    # ========================================
    # Answer analysis workflow
    # ========================================

    async def screen_node(self, state: AnalysisState) -> AnalysisState:
        if not state["answer"] or not state["answer"].strip():
            logger.info("Empty answer, skipping model analysis")
            state["analysis"] = dict(EMPTY_ANSWER_ANALYSIS)
        return state

    async def analyze_node(self, state: AnalysisState) -> AnalysisState:
        state["raw"] = await self._call_llm_async(
            answer_prompt(state["question"], state["answer"], state["job_title"], state["company_name"]),
            ANSWER_COACH_PROMPT,
        )
        return state

    async def normalize_node(self, state: AnalysisState) -> AnalysisState:
        state["analysis"] = normalize_analysis(state["raw"])
        return state

    @staticmethod
    def should_analyze(state: AnalysisState) -> str:
        return "done" if state.get("analysis") else "analyze"

    def _build_analysis_graph(self):
        workflow = StateGraph(AnalysisState)
        workflow.add_node("screen", self.screen_node)
        workflow.add_node("analyze", self.analyze_node)
        workflow.add_node("normalize", self.normalize_node)
        workflow.set_entry_point("screen")

        workflow.add_conditional_edges(
            "screen",
            self.should_analyze,
            {"analyze": "analyze", "done": END}
        )
        workflow.add_edge("analyze", "normalize")
        workflow.add_edge("normalize", END)
        return workflow.compile()

    async def analyze_answer(
        self,
        question: str,
        answer: str,
        job_title: str | None = None,
        company_name: str | None = None,
    ) -> AnswerAnalysis:
        result = await self.analysis_graph.ainvoke({
            "question": question,
            "answer": answer,
            "job_title": job_title,
            "company_name": company_name,
            "raw": {},
            "analysis": None,
        })
        return result["analysis"]

    # ========================================
    # Question generation workflow
    # ========================================

    async def generate_node(self, state: QuestionsState) -> QuestionsState:
        state["raw"] = await self._call_llm_async(
            questions_prompt(state["job_title"], state["skills"], QUESTIONS_PER_CATEGORY),
            QUESTION_WRITER_PROMPT,
        )
        return state

    async def collect_node(self, state: QuestionsState) -> QuestionsState:
        for category in ("behavioral", "technical"):
            items = state["raw"].get(category) or []
            state[category] = [
                {"question": str(item["question"]), "suggestedAnswer": str(item.get("suggestedAnswer") or "")}
                for item in items
                if isinstance(item, dict) and item.get("question")
            ]
        return state

    def _build_questions_graph(self):
        workflow = StateGraph(QuestionsState)
        workflow.add_node("generate", self.generate_node)
        workflow.add_node("collect", self.collect_node)
        workflow.set_entry_point("generate")
        workflow.add_edge("generate", "collect")
        workflow.add_edge("collect", END)
        return workflow.compile()

    async def generate_questions(self, job_title: str, skills: List[str]) -> Dict[str, Any]:
        result = await self.questions_graph.ainvoke({
            "job_title": job_title,
            "skills": skills,
            "raw": {},
            "behavioral": [],
            "technical": [],
        })
        return {"behavioral": result["behavioral"], "technical": result["technical"]}
