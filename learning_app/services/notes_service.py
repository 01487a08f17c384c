"""
Notes Service for building study notes shown beside the video.

Notes are derived from the transcript alone: one section per stretch
between breakpoints, each with a headline and its most frequent concepts.
"""
from typing import Dict, Any, List, Optional

from learning_app.core.constants import NotesDefaults
from learning_app.services.transcript_processor import (
    parse_transcript_lines,
    extract_key_concepts,
    first_sentence,
    format_timestamp,
)


def _section_bounds(breakpoints: List[Dict[str, Any]], duration: int) -> List[tuple]:
    bounds = []
    start = 0
    for breakpoint in breakpoints:
        end = breakpoint["timestamp"]
        if end > start:
            bounds.append((start, end))
            start = end
    if not bounds or start < duration:
        bounds.append((start, max(duration, start)))
    return bounds


def build_study_notes(
    transcript: str,
    duration: int,
    breakpoints: List[Dict[str, Any]],
    concepts_per_section: int = NotesDefaults.KEY_CONCEPTS_PER_SECTION,
    concepts_overall: int = NotesDefaults.KEY_CONCEPTS_OVERALL
) -> Dict[str, Any]:
    """
    Build timestamped study notes.

    Args:
        transcript: Timestamped transcript text
        duration: Video duration in seconds
        breakpoints: Sorted breakpoints; section boundaries
        concepts_per_section: Key concepts listed per section
        concepts_overall: Key concepts listed for the whole video

    Returns:
        Dictionary with key_concepts and sections
        ([{start, end, time, headline, key_concepts}])
    """
    entries = parse_transcript_lines(transcript)
    sections = []

    bounds = _section_bounds(breakpoints, duration)
    for index, (start, end) in enumerate(bounds):
        # The last section also takes anything past the estimated duration
        is_last = index == len(bounds) - 1
        texts = [
            e["text"] for e in entries
            if e["start"] >= start and (e["start"] < end or is_last)
        ]
        if not texts:
            continue

        section_text = " ".join(texts)
        sections.append({
            "start": start,
            "end": end,
            "time": format_timestamp(start),
            "headline": first_sentence(section_text, NotesDefaults.HEADLINE_MAX_CHARS),
            "key_concepts": extract_key_concepts(section_text, concepts_per_section),
        })

    return {
        "key_concepts": extract_key_concepts(transcript, concepts_overall),
        "sections": sections,
    }


def notes_for_time(notes: Dict[str, Any], current_time: float) -> Optional[Dict[str, Any]]:
    """The section being played at current_time."""
    current = None
    for section in notes.get("sections", []):
        if section["start"] <= current_time:
            current = section
    return current
