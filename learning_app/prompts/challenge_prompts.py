"""
Prompts for generating challenge problems from a transcript range.
"""

CHALLENGE_SYSTEM_PROMPT = """You are an expert educator who creates genuinely challenging problems that test deep understanding, not surface-level recall."""

CHALLENGE_USER_PROMPT_TEMPLATE = """Based on the following video transcript titled "{title}", generate {count} challenging problems that:
1. Test actual understanding, not memorization
2. Make the learner think "oh, I didn't see it that way before"
3. Are engaging and interesting to work on

The learner just watched the part of the video from {start_label} to {end_label}.

TRANSCRIPT:
{transcript}

Use a mix of these problem types:
- "multiple_choice": one correct option. Include "options" (3-5 strings) and "correctAnswer" (0-based index)
- "multi_select": several correct options. Include "options" and "correctAnswer" (list of 0-based indices)
- "true_false": a statement to judge. Include "correctAnswer" (true or false)
- "matching": pair related items. Include "columnA", "columnB" (same length) and "correctAnswer" (object mapping columnA index to columnB index)
- "ordering": put steps in order. Include "options" (shuffled) and "correctAnswer" (indices of options in the correct order)
- "construction": design/build something that satisfies constraints from the content
- "application": apply a concept to a novel, unexpected scenario
- "connection": connect ideas from the content to something broader or in a different domain

Include at least one open-ended problem (construction, application or connection).

Output strictly valid JSON with this structure:
{{
  "problems": [
    {{
      "id": "p1",
      "type": "multiple_choice",
      "text": "...",
      "difficulty": "Medium",
      "options": ["...", "...", "..."],
      "correctAnswer": 1
    }},
    {{
      "id": "p2",
      "type": "application",
      "text": "...",
      "difficulty": "Hard"
    }}
  ]
}}

IMPORTANT:
- Problems must be specifically about the content in the transcript, not generic
- Each problem should require genuine thinking
- Do not include markdown formatting. Just the raw JSON string."""
