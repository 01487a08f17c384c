"""
Prompts for grading a learner's answer and giving tutoring feedback.
"""

EVALUATION_USER_PROMPT_TEMPLATE = """You are an expert tutor. Evaluate the student's answer to the following question.

Question: "{question}"
Student Answer: "{answer}"
{reference_section}
Determine if the answer is correct or demonstrates a good understanding.
Provide constructive feedback. If incorrect, explain why without giving the full answer immediately if possible, or guide them.
Suggest a brief "next step" or follow-up thought.

Output strictly valid JSON with this structure:
{{
  "isCorrect": boolean,
  "feedback": "string",
  "nextStep": "string"
}}
Do not include markdown formatting like ```json. Just the raw JSON string."""

EVALUATION_REFERENCE_TEMPLATE = """Reference Answer: "{reference}"
"""
