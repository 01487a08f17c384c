#!/usr/bin/env python3
"""
Check which Anthropic models the configured API key can use.
Run from the repository root: python scripts/check_models.py
"""
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from learning_app.core.config import settings
from learning_app.core.constants import AIModels
from learning_app.services.ai_provider import AnthropicProvider, AIProviderError

CANDIDATE_MODELS = [
    AIModels.CHALLENGE_MODEL,
    "claude-sonnet-4-20250514",
    "claude-3-5-haiku-20241022",
]


def check_models(models):
    """Send a one-word prompt to each model; return the first that answers."""
    provider = AnthropicProvider(settings.ANTHROPIC_API_KEY)
    messages = [{"role": "user", "content": "Reply with the word OK."}]

    print(f"\n{'='*50}")
    print("Anthropic model check")
    print(f"{'='*50}\n")

    available = None
    for i, model in enumerate(models, 1):
        print(f"[{i}/{len(models)}] {model}...", end=" ")
        try:
            provider.generate(messages=messages, model=model, temperature=0, max_tokens=5)
            print("✓")
            if available is None:
                available = model
        except AIProviderError as e:
            print(f"✗ {e}")

    print(f"\n{'='*50}")
    if available:
        print(f"First available model: {available}")
    else:
        print("No candidate model is available for this key.")
    print(f"{'='*50}\n")
    return available


if __name__ == "__main__":
    if not settings.ANTHROPIC_API_KEY:
        print("ANTHROPIC_API_KEY is not set.")
        sys.exit(1)

    models = sys.argv[1:] or CANDIDATE_MODELS
    sys.exit(0 if check_models(models) else 1)
