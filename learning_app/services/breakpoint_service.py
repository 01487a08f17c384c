"""
Breakpoint Service for choosing when to pause a video and quiz the viewer.

The LLM suggests natural pause points once per source; when it returns
nothing usable, evenly spaced fallback breakpoints are used instead.
"""
import json
import logging
from typing import Dict, Any, List, Optional

from learning_app.core.constants import AIModels, TokenLimits, BreakpointDefaults
from learning_app.prompts import BREAKPOINT_USER_PROMPT_TEMPLATE
from learning_app.services.ai_provider import AIProvider, AIProviderError, extract_json_array, get_ai_provider

logger = logging.getLogger(__name__)


def sanitize_breakpoints(raw: Any, duration: Optional[int]) -> List[Dict[str, Any]]:
    """
    Normalize LLM breakpoints into sorted, unique [{"timestamp": int, "reason": str}].

    Entries without a positive numeric timestamp, or past the end of the
    video when the duration is known, are dropped.
    """
    if not isinstance(raw, list):
        return []

    by_timestamp: Dict[int, Dict[str, Any]] = {}
    for item in raw:
        if not isinstance(item, dict):
            continue

        timestamp = item.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            continue

        timestamp = int(round(timestamp))
        if timestamp <= 0 or (duration and timestamp > duration):
            continue

        if timestamp not in by_timestamp:
            reason = item.get("reason")
            by_timestamp[timestamp] = {
                "timestamp": timestamp,
                "reason": reason.strip() if isinstance(reason, str) and reason.strip() else BreakpointDefaults.DEFAULT_REASON
            }

    return [by_timestamp[t] for t in sorted(by_timestamp)]


def fallback_breakpoints(duration: Optional[int]) -> List[Dict[str, Any]]:
    """
    Evenly spaced breakpoints for when no usable LLM suggestion exists.

    Short videos pause at the midpoint and the end; longer ones every
    ten minutes and at the end.
    """
    if not duration or duration <= 0:
        return []

    if duration < BreakpointDefaults.SHORT_VIDEO_SECONDS:
        timestamps = [duration // 2, duration]
    else:
        timestamps = list(range(BreakpointDefaults.INTERVAL_SECONDS, duration, BreakpointDefaults.INTERVAL_SECONDS))
        timestamps.append(duration)

    return [
        {"timestamp": t, "reason": BreakpointDefaults.DEFAULT_REASON}
        for t in sorted(set(timestamps)) if t > 0
    ]


def serialize_breakpoints(breakpoints: List[Dict[str, Any]]) -> str:
    return json.dumps(breakpoints)


def load_breakpoints(serialized: Optional[str], duration: Optional[int]) -> List[Dict[str, Any]]:
    """Deserialize stored breakpoints, falling back when missing, malformed or empty."""
    raw = None
    if serialized:
        try:
            raw = json.loads(serialized)
        except ValueError:
            logger.warning("Ignoring malformed stored breakpoints")

    breakpoints = sanitize_breakpoints(raw, duration)
    return breakpoints or fallback_breakpoints(duration)


def next_breakpoint(
    breakpoints: List[Dict[str, Any]],
    last_checkpoint: float
) -> Optional[Dict[str, Any]]:
    """First breakpoint strictly after the last completed checkpoint."""
    for breakpoint in breakpoints:
        if breakpoint["timestamp"] > last_checkpoint:
            return breakpoint
    return None


def is_ready_for_challenge(current_time: float, breakpoint: Optional[Dict[str, Any]]) -> bool:
    """Playback reached the upcoming breakpoint."""
    return breakpoint is not None and current_time >= breakpoint["timestamp"]


class BreakpointService:
    """Service for LLM breakpoint analysis."""

    def __init__(self, provider: Optional[AIProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> AIProvider:
        if self._provider is None:
            self._provider = get_ai_provider()
        return self._provider

    def analyze_breakpoints(
        self,
        transcript: str,
        duration: int,
        model: str = AIModels.BREAKPOINT_MODEL
    ) -> List[Dict[str, Any]]:
        """
        Ask the LLM for natural breakpoints.

        Never raises: any failure is logged and yields an empty list, so the
        caller falls back to evenly spaced breakpoints.
        """
        user_prompt = BREAKPOINT_USER_PROMPT_TEMPLATE.format(
            duration=duration,
            transcript=(transcript or "")[:TokenLimits.BREAKPOINT_TRANSCRIPT_MAX_CHARS]
        )

        try:
            response = self.provider.generate(
                messages=[{"role": "user", "content": user_prompt}],
                model=model,
                temperature=0.3,
                max_tokens=TokenLimits.BREAKPOINT_MAX_TOKENS
            )
            raw = extract_json_array(response.content)
        except (AIProviderError, ValueError) as e:
            logger.error("Breakpoint analysis error: %s", e)
            return []

        breakpoints = sanitize_breakpoints(raw, duration)
        logger.info("Found %d breakpoints", len(breakpoints))
        return breakpoints
