"""Command line entry point.

Usage examples:
- Streamed translation (partial results on stderr):
  python -m gemini_translate "Bonjour tout le monde" --to en

- Buffered request with an explicit model:
  python -m gemini_translate "Hallo" --from de --to fr --model gemini-2.5-flash --no-stream

The API key is read from GEMINI_API_KEY unless --api-key is given.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from gemini_translate.client import translate
from gemini_translate.errors import GeminiTranslateError
from gemini_translate.types import TranslatorConfig

DEFAULT_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

_logger = logging.getLogger("gemini_translate")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="gemini_translate", description="Translate text with a Gemini model.")
    ap.add_argument("text", help="Text to translate")
    ap.add_argument("--to", dest="target_lang", required=True, help="Target language code")
    ap.add_argument("--from", dest="source_lang", default="auto", help="Source language code (default: auto)")
    ap.add_argument("--detect", dest="detected_lang", default=None, help="Detected language code")
    ap.add_argument("--api-key", default=None, help="API key (default: $GEMINI_API_KEY)")
    ap.add_argument("--base-url", default=DEFAULT_API_BASE_URL, help="API base URL")
    ap.add_argument("--model", default="", help="Model name")
    ap.add_argument("--system-prompt", default="")
    ap.add_argument("--user-prompt", default="")
    ap.add_argument("--thinking-budget", default=None)
    ap.add_argument("--request-arguments", default="", help="Extra generationConfig options as JSON")
    ap.add_argument("--temperature", default=None)
    ap.add_argument("--top-p", default=None)
    ap.add_argument("--no-stream", action="store_true", help="Use generateContent instead of streaming")
    ap.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds (default: none)")
    ap.add_argument(
        "--log-level",
        default=os.environ.get("GEMINI_TRANSLATE_LOG_LEVEL", "WARNING").upper(),
        help="Logging level (default: $GEMINI_TRANSLATE_LOG_LEVEL or WARNING)",
    )
    return ap


def _print_partial(text: str) -> None:
    sys.stderr.write(f"\r{text}")
    sys.stderr.flush()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(name)s - %(message)s")

    api_key = args.api_key or os.environ.get("GEMINI_API_KEY", "")
    if not api_key:
        _logger.error("No API key: pass --api-key or set GEMINI_API_KEY")
        return 2

    try:
        config = TranslatorConfig.from_mapping(
            {
                "apiKey": api_key,
                "apiBaseUrl": args.base_url,
                "modelName": args.model,
                "systemPrompt": args.system_prompt,
                "userPrompt": args.user_prompt,
                "thinkingBudget": args.thinking_budget,
                "requestArguments": args.request_arguments,
                "temperature": args.temperature,
                "topP": args.top_p,
                "useStream": "false" if args.no_stream else "true",
            }
        )
        result = asyncio.run(
            translate(
                args.text,
                args.source_lang,
                args.target_lang,
                config=config,
                detected_lang=args.detected_lang,
                result_sink=None if args.no_stream else _print_partial,
                timeout_s=args.timeout,
            )
        )
    except GeminiTranslateError as e:
        _logger.error("%s", e)
        return 1

    if not args.no_stream:
        sys.stderr.write("\n")
    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
