import pytest

from measurement_engine.core import (
    DistanceSmoother, InvalidConfiguration, estimate_accuracy, is_confidence_acceptable
)


def test_empty_and_single_sample() -> None:
    smoother = DistanceSmoother()

    assert smoother.value() == 0.0
    assert smoother.add(1.5) == 1.5


def test_exponential_average_is_seeded_with_oldest_sample() -> None:
    smoother = DistanceSmoother(factor=0.8, window=5)
    smoother.add(1.0)

    assert smoother.add(2.0) == pytest.approx(1.2)
    assert smoother.add(2.0) == pytest.approx(1.36)


def test_window_drops_stale_samples() -> None:
    smoother = DistanceSmoother(factor=0.5, window=2)
    for sample in (100.0, 1.0, 3.0):
        smoother.add(sample)

    assert smoother.samples == [1.0, 3.0]
    assert smoother.value() == pytest.approx(2.0)


def test_reset_clears_window() -> None:
    smoother = DistanceSmoother()
    smoother.add(4.0)
    smoother.reset()

    assert smoother.samples == []
    assert smoother.add(0.5) == 0.5


@pytest.mark.parametrize("factor, window", [(1.0, 5), (-0.1, 5), (0.8, 0)])
def test_invalid_parameters_are_rejected(factor: float, window: int) -> None:
    with pytest.raises(InvalidConfiguration):
        DistanceSmoother(factor=factor, window=window)


@pytest.mark.parametrize(
    "distance, confidence, depth, expected",
    [
        (1.0, 1.0, False, 0.02),
        (1.0, 1.0, True, 0.01),
        (1.0, 0.0, False, 0.04),
        (2.5, 0.5, False, 0.075),
    ],
)
def test_accuracy_estimate(distance: float, confidence: float, depth: bool, expected: float) -> None:
    assert estimate_accuracy(distance, confidence, depth) == pytest.approx(expected)


def test_confidence_acceptance_threshold() -> None:
    assert is_confidence_acceptable(0.7)
    assert is_confidence_acceptable(1.0)
    assert not is_confidence_acceptable(0.69)
