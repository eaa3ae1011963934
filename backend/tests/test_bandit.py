"""
Tests for epsilon-greedy category selection.
"""

import random
from collections import Counter

import pytest

from app.services.bandit import EpsilonGreedySelector, best_arm
from app.services.errors import InvalidInputError


FLAT = [0.1] * 9


def peaked(index: int):
    rewards = list(FLAT)
    rewards[index] = 0.9
    return rewards


class TestBestArm:

    @pytest.mark.unit
    def test_picks_maximum(self):
        assert best_arm(peaked(4)) == 4

    @pytest.mark.unit
    def test_ties_go_to_lowest_index(self):
        rewards = [0.2, 0.7, 0.3, 0.7, 0.7, 0.1, 0.0, 0.0, 0.0]
        assert best_arm(rewards) == 1
        assert best_arm(FLAT) == 0


class TestEpsilonGreedySelector:

    @pytest.mark.unit
    def test_zero_epsilon_always_exploits(self):
        selector = EpsilonGreedySelector(epsilon=0.0, rng=random.Random(0))
        arms = selector.select_arms(lambda: peaked(6), "user", 50)
        assert arms == [6] * 50

    @pytest.mark.unit
    def test_full_epsilon_explores_every_arm(self):
        selector = EpsilonGreedySelector(epsilon=1.0, rng=random.Random(11))
        arms = selector.select_arms(lambda: peaked(0), "user", 9000)

        counts = Counter(arms)
        assert set(counts) == set(range(9))
        # Uniform: roughly 1000 each
        assert all(800 < c < 1200 for c in counts.values())

    @pytest.mark.unit
    def test_default_epsilon_mostly_exploits(self):
        selector = EpsilonGreedySelector(epsilon=0.2, rng=random.Random(5))
        arms = selector.select_arms(lambda: peaked(2), "user", 2000)

        share = arms.count(2) / len(arms)
        # 0.8 exploit + 0.2 * 1/9 explore
        assert 0.78 < share < 0.90

    @pytest.mark.unit
    def test_reward_source_reread_every_pull(self):
        calls = []

        def source():
            calls.append(1)
            return peaked(len(calls) % 9)

        selector = EpsilonGreedySelector(epsilon=0.0, rng=random.Random())
        arms = selector.select_arms(source, "user", 4)

        assert len(calls) == 4
        assert arms == [1, 2, 3, 4]

    @pytest.mark.unit
    def test_zero_count_returns_empty(self):
        selector = EpsilonGreedySelector(rng=random.Random())
        assert selector.select_arms(lambda: FLAT, "user", 0) == []

    @pytest.mark.unit
    def test_negative_count_rejected(self):
        selector = EpsilonGreedySelector(rng=random.Random())
        with pytest.raises(InvalidInputError):
            selector.select_arms(lambda: FLAT, "user", -1)

    @pytest.mark.unit
    def test_wrong_reward_length_rejected(self):
        selector = EpsilonGreedySelector(epsilon=0.0)
        with pytest.raises(ValueError):
            selector.select_arm([0.5] * 8)

    @pytest.mark.unit
    @pytest.mark.parametrize("epsilon", [-0.1, 1.5])
    def test_epsilon_out_of_range(self, epsilon):
        with pytest.raises(ValueError):
            EpsilonGreedySelector(epsilon=epsilon)

    @pytest.mark.unit
    def test_seeded_selectors_agree(self):
        first = EpsilonGreedySelector(rng=random.Random(99)).select_arms(lambda: peaked(3), "u", 30)
        second = EpsilonGreedySelector(rng=random.Random(99)).select_arms(lambda: peaked(3), "u", 30)
        assert first == second
