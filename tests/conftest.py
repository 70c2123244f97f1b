"""Shared fixtures for the yaminabe tests."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from yaminabe.knowledge_base import FrequencyModel  # noqa: E402


SCENARIO_CORPUS = ["私 は 猫 が 好き", "猫 は 可愛い 動物 だ"]

TAGGED_CORPUS = [
    "私 代名詞 は 助詞 猫 名詞 が 助詞 好き 形容動詞",
    "猫 名詞 は 助詞 可愛い 形容詞 動物 名詞 だ 助動詞",
    "犬 名詞 も 助詞 可愛い 形容詞",
]


@pytest.fixture
def scenario_lines():
    return list(SCENARIO_CORPUS)


@pytest.fixture
def bigram_model(scenario_lines):
    return FrequencyModel.build(scenario_lines, mode="bigram")


@pytest.fixture
def unigram_model(scenario_lines):
    return FrequencyModel.build(scenario_lines, mode="unigram")


@pytest.fixture
def tagged_model():
    return FrequencyModel.build(TAGGED_CORPUS, mode="bigram", tagged=True)


@pytest.fixture
def corpus_file(tmp_path, scenario_lines):
    path = tmp_path / "corpus.txt"
    path.write_text("\n".join(scenario_lines) + "\n", encoding="utf-8")
    return path
