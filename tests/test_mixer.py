"""
Tests for the QuizMixer application context and the command line.
"""

import pytest

from yaminabe.cli import main
from yaminabe.errors import CorpusUnreadable, NothingToMix
from yaminabe.mixer import QuizMixer, mix_request
from yaminabe.prediction_engine import GenerationBudget, RenderConfig, SynthesisConfig


QUESTIONS = ["猫 は 可愛い 動物 でしょう ?", "私 は 猫 が 好き でしょ う ?"]


@pytest.fixture
def config():
    return SynthesisConfig(budget=GenerationBudget(deadline_seconds=None, max_iterations=50))


@pytest.fixture
def mixer(scenario_lines, config):
    with QuizMixer(corpus_lines=scenario_lines, synthesis_config=config) as mixer:
        yield mixer


class TestConstruction:
    """Tests for building the mixer's model."""

    def test_from_file(self, corpus_file, config):
        with QuizMixer(corpus_path=corpus_file, synthesis_config=config) as mixer:
            assert mixer.model.total == 8
            assert mixer.get_stats()["corpus_path"] == str(corpus_file)

    def test_missing_corpus(self, tmp_path):
        with pytest.raises(CorpusUnreadable):
            QuizMixer(corpus_path=tmp_path / "missing.txt")

    def test_requires_exactly_one_source(self, corpus_file, scenario_lines):
        with pytest.raises(ValueError):
            QuizMixer()
        with pytest.raises(ValueError):
            QuizMixer(corpus_path=corpus_file, corpus_lines=scenario_lines)


class TestMixQuestions:
    """Tests for merging question strings."""

    def test_two_questions(self, mixer):
        """Endings are dropped from the fragments and one closing is added."""
        result = mixer.mix_questions(QUESTIONS, seed=1)
        assert result["success"]
        assert result["result"].endswith("でしょう?")
        assert result["result"].count("?") == 1
        assert " " not in result["result"]
        assert result["attempts"] == 50

    def test_same_seed_same_question(self, mixer):
        first = mixer.mix_questions(QUESTIONS, seed=123)
        second = mixer.mix_questions(QUESTIONS, seed=123)
        assert first["result"] == second["result"]

    def test_single_question_is_returned_joined(self, mixer):
        result = mixer.mix_questions(["猫 は 可愛い ?"])
        assert result["success"]
        assert result["result"] == "猫は可愛い?"
        assert result["perplexity"] is None

    def test_no_questions(self, mixer):
        result = mixer.mix_questions([])
        assert not result["success"]
        assert "quiz" in result["error"]

    def test_invalid_bias(self, mixer):
        """An out of range bias is reported instead of raised."""
        result = mixer.mix_questions(QUESTIONS, bias=1.5)
        assert not result["success"]

    def test_bias_override(self, mixer):
        assert mixer.mix_questions(QUESTIONS, bias=0.5, seed=2)["success"]

    def test_submit(self, mixer):
        future = mixer.submit(QUESTIONS, seed=4)
        assert future.result(timeout=30)["success"]

    def test_submit_matches_direct_request(self, mixer):
        expected = mix_request(
            mixer.model, QUESTIONS, mixer.synthesis_config, mixer.render_config,
            mixer.segmenter, seed=4,
        )
        assert mixer.submit(QUESTIONS, seed=4).result(timeout=30) == expected

    def test_submit_on_process_pool(self, scenario_lines, config):
        """Requests run in a worker process against a pickled model snapshot."""
        with QuizMixer(corpus_lines=scenario_lines, synthesis_config=config,
                       max_workers=1, use_processes=True) as mixer:
            result = mixer.submit(QUESTIONS, seed=4).result(timeout=60)
            assert result["success"]
            assert result["result"].endswith("でしょう?")


class TestMix:
    """Tests for merging tokenized quizzes."""

    def test_strategy_override(self, mixer):
        result = mixer.mix([["私", "は", "猫"], ["可愛い", "動物", "だ"]],
                           strategy="greedy_bandit", seed=0)
        assert result.strategy.value == "greedy_bandit"

    def test_no_quizzes_raises(self, mixer):
        with pytest.raises(NothingToMix):
            mixer.mix([])


class TestRender:
    """Tests for turning tokens into a sentence."""

    def test_render(self, mixer):
        assert mixer.render(["猫", "は", "でしょ", "う", "?"]) == "猫はでしょう?"

    def test_custom_render_config(self, scenario_lines):
        render_config = RenderConfig(joiner=" ", closing=" ?")
        with QuizMixer(corpus_lines=scenario_lines, render_config=render_config) as mixer:
            assert mixer.render(["cat", "?"]) == "cat ?"

    def test_segment(self, mixer):
        assert mixer.segment("猫 は 可愛い") == ["猫", "は", "可愛い"]


class TestRebuild:
    """Tests for swapping in a rebuilt model."""

    def test_rebuild_swaps_model(self, mixer):
        old = mixer.model
        new = mixer.rebuild(corpus_lines=["犬 は 賢い"])
        assert mixer.model is new
        assert new.count(("犬", "は")) == 1
        assert old.count(("犬", "は")) == 0
        assert old.total == 8

    def test_rebuild_from_same_file(self, corpus_file, config):
        with QuizMixer(corpus_path=corpus_file, synthesis_config=config) as mixer:
            old = mixer.model
            assert mixer.rebuild() is not old
            assert mixer.model.total == old.total

    def test_failed_rebuild_keeps_model(self, mixer, tmp_path):
        old = mixer.model
        with pytest.raises(CorpusUnreadable):
            mixer.rebuild(corpus_path=tmp_path / "missing.txt")
        assert mixer.model is old


class TestStats:
    """Tests for get_stats."""

    def test_stats(self, mixer):
        stats = mixer.get_stats()
        assert stats["mode"] == "bigram"
        assert stats["total"] == 8
        assert stats["lines"] == 2
        assert stats["most_frequent"]["count"] == 1
        assert stats["corpus_path"] is None


class TestCommandLine:
    """Tests for the yaminabe command."""

    def test_merges_questions(self, corpus_file, capsys):
        code = main([str(corpus_file), *QUESTIONS, "--iterations", "30", "--seed", "1"])
        assert code == 0
        assert capsys.readouterr().out.strip().endswith("でしょう?")

    def test_stats(self, corpus_file, capsys):
        code = main([str(corpus_file), "猫 は 可愛い", "--stats"])
        assert code == 0
        out = capsys.readouterr().out
        assert "Model Statistics" in out
        assert "猫は可愛い" in out

    def test_missing_corpus(self, tmp_path):
        assert main([str(tmp_path / "missing.txt"), "猫 は"]) == 1

    def test_invalid_bias(self, corpus_file):
        assert main([str(corpus_file), "猫 は", "--bias", "2"]) == 2

    def test_greedy_with_deadline(self, corpus_file, capsys):
        code = main([
            str(corpus_file), *QUESTIONS,
            "--strategy", "greedy_bandit", "--deadline", "0.5", "--seed", "3",
        ])
        assert code == 0
