"""
Command line entry point for the quiz mixer
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from yaminabe.errors import YaminabeError
from yaminabe.mixer import QuizMixer
from yaminabe.prediction_engine.types import GenerationBudget, SearchStrategy, SynthesisConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yaminabe",
        description="Merge several space-separated quizzes into one question.",
    )
    parser.add_argument("corpus", help="Corpus file, one space-separated sentence per line")
    parser.add_argument("questions", nargs="+", help="Space-separated quiz questions")
    parser.add_argument("--bias", type=float, default=1.0,
                        help="Score discount for continuing the current quiz (0 < p <= 1)")
    parser.add_argument("--strategy", choices=[s.value for s in SearchStrategy],
                        default=SearchStrategy.RANDOM_WALK.value)
    parser.add_argument("--deadline", type=float, default=3.0,
                        help="Search time in seconds")
    parser.add_argument("--iterations", type=int, default=None,
                        help="Stop after this many attempts instead of the deadline")
    parser.add_argument("--coverage", type=int, default=1,
                        help="Tokens every quiz must contribute")
    parser.add_argument("--min-length", type=int, default=2)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--unigram", action="store_true", help="Count single tokens")
    parser.add_argument("--tagged", action="store_true",
                        help="Corpus lines alternate token and part-of-speech tag")
    parser.add_argument("--pos-rules", action="store_true",
                        help="Apply part-of-speech adjacency rules (needs --tagged)")
    parser.add_argument("--stats", action="store_true", help="Print model statistics")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = SynthesisConfig(
            strategy=args.strategy,
            bias=args.bias,
            budget=GenerationBudget(
                deadline_seconds=None if args.iterations else args.deadline,
                max_iterations=args.iterations,
                min_coverage=args.coverage,
                min_length=args.min_length,
            ),
        )
    except ValidationError as e:
        print(f"❌ Invalid settings: {e}", file=sys.stderr)
        return 2

    try:
        mixer = QuizMixer(
            corpus_path=args.corpus,
            mode="unigram" if args.unigram else "bigram",
            tagged=args.tagged,
            synthesis_config=config,
            use_pos_rules=args.pos_rules,
            max_workers=1,
        )
    except YaminabeError as e:
        print(f"❌ Failed to build model: {str(e)}", file=sys.stderr)
        return 1

    with mixer:
        if args.stats:
            stats = mixer.get_stats()
            print("📊 Model Statistics:")
            print(f"   Mode: {stats['mode']}")
            print(f"   Total: {stats['total']}")
            print(f"   Distinct items: {stats['distinct_items']}")
            print(f"   Lines: {stats['lines']}")

        result = mixer.mix_questions(args.questions, seed=args.seed)

    if not result["success"]:
        print(f"❌ Mixing failed: {result['error']}", file=sys.stderr)
        return 1

    print(result["result"])
    if result["perplexity"] is not None:
        logger.info(f"Perplexity: {result['perplexity']:.4f} after {result['attempts']} attempts")
    return 0


if __name__ == "__main__":
    sys.exit(main())
