"""
Prompts for finding natural pause points in a video transcript.
"""

BREAKPOINT_USER_PROMPT_TEMPLATE = """Analyze this video transcript and identify natural breakpoints where it would be good to pause and test understanding. Look for:
- Topic transitions ("Now let's move on to...", "In the next section...")
- Completion of a concept or idea
- End of worked examples
- Natural pauses before new material

Video duration: {duration} seconds

Transcript:
{transcript}

Return ONLY a JSON array of breakpoints, no other text:
[{{ "timestamp": <seconds>, "reason": "<brief reason>" }}]

Aim for breakpoints roughly every 10-15 minutes for long videos, but prioritize natural transitions over arbitrary time intervals. For short videos (<10 min), identify 1-2 key breakpoints. Always include at least one breakpoint."""
