"""Entry point for the prompt learning optimizer.

Optimize a prompt with:
    python -m prompt_learning "Write code" --domain coding

Requirements:
    - OpenAI API key set in .env file or OPENAI_API_KEY environment variable
"""

import argparse
import asyncio
import sys

from prompt_learning.config import load_settings, setup_logging
from prompt_learning.runner import run_optimization


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="prompt-learning", description="Optimize a prompt with retrieval-augmented learning."
    )
    parser.add_argument("prompt", help="Prompt to optimize")
    parser.add_argument("--domain", default="general", help="Domain for optimization context")
    parser.add_argument("--max-iterations", type=int, default=None)
    parser.add_argument("--target-score", type=float, default=None)
    parser.add_argument("--config", default=None, help="Path to a YAML configuration file")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    settings = load_settings(args.config)
    setup_logging(settings.log_level)

    result = asyncio.run(
        run_optimization(
            args.prompt,
            settings,
            domain=args.domain,
            max_iterations=args.max_iterations,
            target_score=args.target_score,
        )
    )
    return 0 if result is not None else 1


if __name__ == "__main__":
    sys.exit(main())
