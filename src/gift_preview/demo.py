# src/gift_preview/demo.py
import argparse
import json
import logging
import sys

from dotenv import load_dotenv


def main(argv=None):
    """CLI demo: compile a gift preview request into constraints, optionally generate the image."""
    from .compiler import compile_payload
    from .compiler.types import RequestContext
    from .session import PreviewError, build_controller_from_env

    parser = argparse.ArgumentParser(
        prog="gift-preview",
        description="Compile occasion/recipient/vibe/notes into a gift preview prompt.",
    )
    parser.add_argument("notes", nargs="*", help="Free-text notes (e.g. no candles, include a mug)")
    parser.add_argument("--occasion", default="Birthday")
    parser.add_argument("--recipient", default="Friend")
    parser.add_argument("--vibe", default="Minimalist")
    parser.add_argument("--tier", default="Standard", help="Standard or Premium")
    parser.add_argument("--social", default="", help="Optional social-profile context")
    parser.add_argument("--session-id", default="cli", dest="session_id")
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Call the configured image backend (needs credentials in the environment)",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose debug logs")

    args = parser.parse_args(argv)
    # credentials (REPLICATE_API_TOKEN, OPENAI_API_KEY, OPENROUTER_API_KEY) at runtime only
    load_dotenv()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    payload = {
        "occasion": args.occasion,
        "recipient": args.recipient,
        "vibe": args.vibe,
        "tier": args.tier,
        "notes": " ".join(args.notes),
        "social": args.social,
        "sessionId": args.session_id,
    }

    try:
        if args.generate:
            result = build_controller_from_env().run(RequestContext.from_payload(payload))
        else:
            result = compile_payload(payload)
        print(json.dumps(result, indent=2, ensure_ascii=False))
    except (PreviewError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
