"""Run one task through the analysis pipeline from the command line.

Usage:
    python scripts/analyze_text.py "napsat report" [--email you@example.com]
    python scripts/analyze_text.py --audio recording.wav
"""

import argparse
import asyncio
import base64
import json
import os
import sys

# Add project root to path so we can import app
sys.path.append(os.getcwd())

from app.config.dependencies import build_orchestrator
from app.config.settings import settings
from app.domain.errors import PipelineError


async def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("text", nargs="?", help="Typed task description")
    parser.add_argument("--audio", help="Path to an audio file to transcribe instead of text")
    parser.add_argument("--email", help="Send the notification to this address")
    args = parser.parse_args()

    audio_base64 = None
    if args.audio:
        with open(args.audio, "rb") as audio_fp:
            audio_base64 = base64.b64encode(audio_fp.read()).decode("ascii")

    orchestrator = build_orchestrator(settings)
    try:
        result = await orchestrator.run(
            audio_base64=audio_base64,
            text=args.text,
            user_email=args.email,
        )
    except PipelineError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result.analysis.to_payload(orchestrator.schema), ensure_ascii=False, indent=2))
    print()
    print(result.notification.subject)
    print(result.notification.body)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
