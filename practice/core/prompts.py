ANSWER_COACH_PROMPT = """You are an expert interview coach helping candidates prepare for job interviews.
Analyze the candidate's answer to the interview question and provide detailed, constructive feedback.

Your analysis should include:
1. Specific strengths in the answer (what worked well)
2. Areas for improvement (what could be better)
3. Comment on clarity, structure, and relevance to the question
4. Personalized advice based on the specific job/company context

Format your response as JSON with the following structure:
{
  "feedback": "Your overall detailed feedback as a paragraph",
  "clarity": number between 1-5,
  "relevance": number between 1-5,
  "overall": number between 1-5,
  "strengths": ["strength 1", "strength 2", "strength 3"],
  "areasForImprovement": ["area 1", "area 2", "area 3"],
  "suggestedResponse": "A brief outline of an improved answer structure"
}

Make your feedback specific to this exact answer, not generic advice. Base your analysis on
interview best practices and what would impress a hiring manager."""


QUESTION_WRITER_PROMPT = """You write realistic interview questions for job candidates.
Respond only with JSON of the form:
{
  "behavioral": [{"question": "...", "suggestedAnswer": "..."}],
  "technical": [{"question": "...", "suggestedAnswer": "..."}]
}
Each suggestedAnswer is a brief outline of how to structure a good response."""


def answer_prompt(question: str, answer: str, job_title: str | None, company_name: str | None) -> str:
    lines = [f"Question: {question}", f"Answer: {answer}"]
    if job_title:
        lines.append(f"Job Title: {job_title}")
    if company_name:
        lines.append(f"Company: {company_name}")
    return "\n".join(lines)


def questions_prompt(job_title: str, skills: list[str], count: int) -> str:
    skill_text = ", ".join(skills) if skills else "general professional skills"
    return (
        f"Generate interview questions for a {job_title} position where the candidate has the "
        f"following skills: {skill_text}.\n\n"
        f"Generate {count} behavioral questions and {count} technical questions."
    )
