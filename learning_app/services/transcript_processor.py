"""
Transcript Processor for timestamped "[m:ss] text" transcripts.

Provides:
1. Timestamp parsing/formatting
2. Range extraction - the part of a transcript a study session covers
3. Key concept extraction - most frequent content words
"""
import re
from collections import Counter
from typing import List, Dict, Any, Optional


TIMESTAMP_LINE_RE = re.compile(r'^\s*\[((?:\d+:)?\d+:\d{2})\]\s?(.*)$')
TIMESTAMP_TOKEN_RE = re.compile(r'\[(?:\d+:)?\d+:\d{2}\]')
WORD_RE = re.compile(r"[a-z][a-z'-]*[a-z]")

MIN_CONCEPT_LENGTH = 4

STOPWORDS = frozenset("""
a about above after again against all also am an and any are aren't as at be because been
before being below between both but by can can't cannot could couldn't did didn't do does
doesn't doing don't down during each even every few for from further get gets getting go goes
going gonna gotta got had hadn't has hasn't have haven't having he he'd he'll he's her here
here's hers herself him himself his how how's i i'd i'll i'm i've if in into is isn't it
it's its itself just know kind let let's like look lot lots make makes many maybe me mean
might more most much must mustn't my myself need now of off okay on once one only or other
ought our ours ourselves out over own pretty really right same say says see she she'd she'll
she's should shouldn't so some something still such sure take than that that's the their
theirs them themselves then there there's these they they'd they'll they're they've thing
things think this those through thus to too two uh um under until up us use used using very
want was wasn't way we we'd we'll we're we've well were weren't what what's when when's where
where's whether which while who who's whom why why's will with won't would wouldn't yeah yes
you you'd you'll you're you've your yours yourself yourselves actually basically going gonna
""".split())


def parse_timestamp(value: str) -> int:
    """
    Parse "m:ss" or "h:mm:ss" into seconds.

    Raises:
        ValueError: If the value is not a timestamp
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid timestamp: {value!r}")

    seconds = 0
    for part in parts:
        seconds = seconds * 60 + int(part)
    return seconds


def format_timestamp(seconds: float) -> str:
    """Format seconds as "m:ss" (minutes are not wrapped into hours)."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def parse_transcript_lines(transcript: str) -> List[Dict[str, Any]]:
    """
    Split a timestamped transcript into [{"start": seconds, "text": ...}].

    Lines without a leading timestamp are continuations of the previous entry.
    Text before the first timestamp is dropped.
    """
    entries: List[Dict[str, Any]] = []
    for line in (transcript or "").splitlines():
        match = TIMESTAMP_LINE_RE.match(line)
        if match:
            entries.append({
                "start": parse_timestamp(match.group(1)),
                "text": match.group(2).strip()
            })
        elif entries and line.strip():
            entries[-1]["text"] = f"{entries[-1]['text']} {line.strip()}".strip()
    return entries


def extract_transcript_range(
    transcript: str,
    start: float,
    end: Optional[float],
    max_chars: int
) -> str:
    """
    Return the transcript lines whose timestamps fall within [start, end].

    Falls back to the beginning of the transcript when it has no timestamps
    or no line falls in range. The result never exceeds max_chars.
    """
    transcript = transcript or ""
    entries = parse_transcript_lines(transcript)

    selected = [
        f"[{format_timestamp(e['start'])}] {e['text']}"
        for e in entries
        if e["start"] >= start and (end is None or e["start"] <= end)
    ]

    if not selected:
        return transcript[:max_chars]

    return "\n".join(selected)[:max_chars]


def strip_timestamps(text: str) -> str:
    """Remove "[m:ss]" markers from transcript text."""
    return re.sub(r'\s+', ' ', TIMESTAMP_TOKEN_RE.sub(' ', text or '')).strip()


def extract_key_concepts(text: str, limit: int = 10) -> List[Dict[str, Any]]:
    """
    Find the most frequent content words of a transcript.

    Words are lower-cased; stopwords and words shorter than four letters are
    ignored. Ties keep the order of first appearance.
    """
    if limit <= 0:
        return []

    words = [
        w for w in WORD_RE.findall(strip_timestamps(text).lower())
        if len(w) >= MIN_CONCEPT_LENGTH and w not in STOPWORDS
    ]

    # Counter.most_common is stable for equal counts (insertion order)
    counts = Counter(words)
    return [{"term": term, "count": count} for term, count in counts.most_common(limit)]


def first_sentence(text: str, max_chars: int) -> str:
    """Return the first sentence of text, truncated to max_chars with an ellipsis."""
    text = strip_timestamps(text)
    if not text:
        return ""

    match = re.search(r'(?<=[.!?])\s', text)
    sentence = text[:match.start()] if match else text

    if len(sentence) > max_chars:
        sentence = sentence[:max_chars - 1].rstrip() + "…"
    return sentence
