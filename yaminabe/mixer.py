"""
Quiz Mixer
Builds the frequency model once and serves merge requests against it
"""

from typing import List, Dict, Any, Iterable, Optional, Sequence, Union
from concurrent.futures import Future, ProcessPoolExecutor, ThreadPoolExecutor
from pathlib import Path
import logging
import random
import threading

from yaminabe.errors import YaminabeError
from yaminabe.knowledge_base.frequency_model import FrequencyModel, DEFAULT_VOCABULARY_BOUND
from yaminabe.knowledge_base.types import FrequencyMode
from yaminabe.prediction_engine import create_sequence_synthesizer
from yaminabe.prediction_engine.types import (
    GenerationResult,
    RenderConfig,
    SearchStrategy,
    SynthesisConfig,
)
from yaminabe.tokenizer.base import SegmenterBase
from yaminabe.tokenizer.whitespace_segmenter import WhitespaceSegmenter

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def mix_quizzes(model: FrequencyModel,
                quizzes: Sequence[Sequence[str]],
                config: SynthesisConfig,
                use_pos_rules: bool = False,
                bias: Optional[float] = None,
                strategy: Optional[Union[SearchStrategy, str]] = None,
                seed: Optional[int] = None) -> GenerationResult:
    """
    Merge tokenized quizzes against one model snapshot.

    Args:
        model: Built FrequencyModel
        quizzes: Token sequences to merge
        config: Base strategy, bias and budget
        use_pos_rules: Apply part-of-speech adjacency rules
        bias: Continuation bias overriding the configured one
        strategy: Search strategy overriding the configured one
        seed: Seed for a reproducible random source

    Returns:
        GenerationResult from the synthesizer

    Raises:
        NothingToMix, InvalidCoverageConfig, NoCandidateFound
    """
    update: Dict[str, Any] = {}
    if bias is not None:
        update["bias"] = bias
    if strategy is not None:
        update["strategy"] = SearchStrategy(strategy)

    # validate overrides through the model's field constraints
    if update:
        config = SynthesisConfig(**{**config.model_dump(), **update})

    rng = random.Random(seed) if seed is not None else random.Random()
    synthesizer = create_sequence_synthesizer(model, use_pos_rules=use_pos_rules)
    return synthesizer.synthesize(quizzes, config, rng)


def render_tokens(tokens: Sequence[str], render_config: RenderConfig) -> str:
    """
    Turn merged tokens into one question sentence.

    Question endings carried over from the source quizzes are dropped
    and a single closing is appended.
    """
    kept = [t for t in tokens if t not in render_config.drop_tokens]
    return render_config.joiner.join(kept) + render_config.closing


def mix_request(model: FrequencyModel,
                questions: List[str],
                config: SynthesisConfig,
                render_config: RenderConfig,
                segmenter: SegmenterBase,
                use_pos_rules: bool = False,
                bias: Optional[float] = None,
                seed: Optional[int] = None) -> Dict[str, Any]:
    """
    Serve one merge request: segment, mix and render.

    Module level so it can run in a worker process as well as a thread.

    Returns:
        Result dictionary with the rendered question, or the error
    """
    try:
        quizzes = [segmenter.segment(question) for question in questions]
        result = mix_quizzes(model, quizzes, config, use_pos_rules, bias=bias, seed=seed)

        if len(quizzes) == 1:
            text = render_config.joiner.join(result.tokens)
        else:
            text = render_tokens(result.tokens, render_config)

        return {
            "success": True,
            "result": text,
            "tokens": result.tokens,
            "perplexity": result.perplexity,
            "attempts": result.attempts,
        }

    except (YaminabeError, ValueError) as e:
        logger.error(f"Mixing failed: {str(e)}")
        return {"success": False, "error": str(e)}


class QuizMixer:
    """
    Application context for quiz mixing.

    Owns the frequency model, built once at construction, and hands the
    current immutable model to a private synthesizer per request. A
    rebuild constructs a new model first and then swaps the reference,
    so requests never observe a partially built table.
    """

    def __init__(self,
                 corpus_path: Optional[Union[str, Path]] = None,
                 corpus_lines: Optional[Iterable[str]] = None,
                 mode: Union[FrequencyMode, str] = FrequencyMode.BIGRAM,
                 tagged: bool = False,
                 vocabulary_bound: Optional[int] = DEFAULT_VOCABULARY_BOUND,
                 synthesis_config: Optional[SynthesisConfig] = None,
                 render_config: Optional[RenderConfig] = None,
                 segmenter: Optional[SegmenterBase] = None,
                 use_pos_rules: bool = False,
                 max_workers: int = 4,
                 use_processes: bool = False):
        """
        Initialize the mixer and build its model.

        Args:
            corpus_path: Corpus file to build from
            corpus_lines: Corpus lines to build from (instead of a file)
            mode: Counting mode ('unigram' or 'bigram')
            tagged: Corpus lines alternate token and part-of-speech tag fields
            vocabulary_bound: Assumed vocabulary size for unseen items
            synthesis_config: Default strategy, bias and budget
            render_config: How merged tokens become a sentence
            segmenter: Collaborator splitting question strings into tokens
            use_pos_rules: Apply part-of-speech adjacency rules when merging
            max_workers: Workers for submitted requests
            use_processes: Use ProcessPoolExecutor instead of ThreadPoolExecutor

        Raises:
            ValueError: If neither or both corpus sources are given
            CorpusUnreadable: If the corpus file cannot be read
        """
        self.mode = FrequencyMode(mode)
        self.tagged = tagged
        self.vocabulary_bound = vocabulary_bound
        self.synthesis_config = synthesis_config or SynthesisConfig()
        self.render_config = render_config or RenderConfig()
        self.segmenter = segmenter or WhitespaceSegmenter()
        self.use_pos_rules = use_pos_rules
        self.corpus_path = Path(corpus_path) if corpus_path is not None else None

        self._rebuild_lock = threading.Lock()
        self._model = self._build_model(self.corpus_path, corpus_lines)

        # Choose executor type
        if use_processes:
            self._executor = ProcessPoolExecutor(max_workers=max_workers)
        else:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="yaminabe-mix"
            )
        logger.info(
            f"QuizMixer initialized with max_workers={max_workers}, "
            f"use_processes={use_processes}"
        )

    def __enter__(self) -> "QuizMixer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def model(self) -> FrequencyModel:
        """The current model snapshot."""
        return self._model

    def _build_model(self,
                     corpus_path: Optional[Path],
                     corpus_lines: Optional[Iterable[str]]) -> FrequencyModel:
        if (corpus_path is None) == (corpus_lines is None):
            raise ValueError("Exactly one of corpus_path or corpus_lines is required")

        if corpus_path is not None:
            return FrequencyModel.from_file(
                corpus_path, self.mode, self.tagged, self.vocabulary_bound
            )

        return FrequencyModel.build(
            corpus_lines, self.mode, self.tagged, self.vocabulary_bound
        )

    def rebuild(self,
                corpus_path: Optional[Union[str, Path]] = None,
                corpus_lines: Optional[Iterable[str]] = None) -> FrequencyModel:
        """
        Rebuild the model and swap it in.

        Rebuilds are serialized. In-flight requests keep the snapshot they
        started with; the previous model stays in service if building fails.

        Args:
            corpus_path: New corpus file (default: the current corpus file)
            corpus_lines: New corpus lines

        Returns:
            The newly installed model

        Raises:
            CorpusUnreadable: If the corpus file cannot be read
        """
        with self._rebuild_lock:
            if corpus_path is None and corpus_lines is None:
                path = self.corpus_path
            else:
                path = Path(corpus_path) if corpus_path is not None else None

            model = self._build_model(path, corpus_lines)
            self._model = model
            if path is not None:
                self.corpus_path = path

        logger.info(f"Model rebuilt: total={model.total}, items={model.distinct_items}")
        return model

    def segment(self, text: str) -> List[str]:
        """
        Split a question string into tokens with the segmenter.

        Args:
            text: Question text, already separated by spaces

        Returns:
            Token list
        """
        return self.segmenter.segment(text)

    def render(self, tokens: Sequence[str]) -> str:
        """Render merged tokens with this mixer's RenderConfig."""
        return render_tokens(tokens, self.render_config)

    def mix(self,
            quizzes: Sequence[Sequence[str]],
            bias: Optional[float] = None,
            strategy: Optional[Union[SearchStrategy, str]] = None,
            seed: Optional[int] = None) -> GenerationResult:
        """
        Merge tokenized quizzes into one sequence.

        Args:
            quizzes: Token sequences to merge
            bias: Continuation bias overriding the configured one
            strategy: Search strategy overriding the configured one
            seed: Seed for a reproducible random source

        Returns:
            GenerationResult from the synthesizer

        Raises:
            NothingToMix, InvalidCoverageConfig, NoCandidateFound
        """
        return mix_quizzes(
            self._model, quizzes, self.synthesis_config, self.use_pos_rules,
            bias=bias, strategy=strategy, seed=seed,
        )

    def mix_questions(self,
                      questions: List[str],
                      bias: Optional[float] = None,
                      seed: Optional[int] = None) -> Dict[str, Any]:
        """
        Merge question strings into one rendered question.

        Args:
            questions: Space separated question strings
            bias: Continuation bias overriding the configured one
            seed: Seed for a reproducible random source

        Returns:
            Result dictionary with the rendered question
        """
        return mix_request(
            self._model, questions, self.synthesis_config, self.render_config,
            self.segmenter, self.use_pos_rules, bias, seed,
        )

    def submit(self,
               questions: List[str],
               bias: Optional[float] = None,
               seed: Optional[int] = None) -> "Future[Dict[str, Any]]":
        """
        Run a merge request on the worker pool.

        The request is bound to the model current at submission time.

        Args:
            questions: Space separated question strings
            bias: Continuation bias overriding the configured one
            seed: Seed for a reproducible random source

        Returns:
            Future resolving to the result dictionary
        """
        return self._executor.submit(
            mix_request, self._model, questions, self.synthesis_config,
            self.render_config, self.segmenter, self.use_pos_rules, bias, seed,
        )

    def get_stats(self) -> Dict[str, Any]:
        """
        Get current model statistics.

        Returns:
            Model statistics and information
        """
        stats = self._model.get_statistics()
        most_frequent = None
        if stats.most_frequent is not None:
            item, count = stats.most_frequent
            most_frequent = {"item": item if isinstance(item, str) else list(item), "count": count}

        return {
            "mode": stats.mode.value,
            "total": stats.total,
            "distinct_items": stats.distinct_items,
            "lines": stats.lines,
            "tagged_tokens": stats.tagged_tokens,
            "n_one_ratio": stats.n_one_ratio,
            "average_occurrence": stats.average_occurrence,
            "most_frequent": most_frequent,
            "corpus_path": str(self.corpus_path) if self.corpus_path else None,
        }

    def close(self) -> None:
        """Shut down the worker pool."""
        self._executor.shutdown(wait=True)
