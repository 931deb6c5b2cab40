"""
Helpers for validating metric value changes during tests.

Provides context managers to ensure metrics are properly updated by the code under test.
"""

from contextlib import contextmanager


def _current(metric) -> float:
    if not hasattr(metric, "_value"):
        raise ValueError(f"Metric {metric} doesn't have a _value attribute")
    return metric._value.get()


@contextmanager
def metric_delta(metric, expected_delta=1):
    """
    Context manager to validate metric value changes.

    Usage:
        with metric_delta(METRICS["extraction_failures"]):
            # Code that should increment counter by 1
            pass

        with metric_delta(METRICS["extractions"].labels(stage="main"), 2):
            # Labelled children work the same way
            pass
    """
    initial_value = _current(metric)

    yield

    actual_delta = _current(metric) - initial_value
    if actual_delta != expected_delta:
        raise AssertionError(
            f"Expected metric to change by {expected_delta}, "
            f"but it changed by {actual_delta} "
            f"(from {initial_value} to {initial_value + actual_delta})"
        )


def get_histogram_count(histogram):
    """Get the current observation count for a histogram."""
    for metric in histogram.collect():
        for sample in metric.samples:
            if sample.name.endswith("_count"):
                return sample.value
    return 0.0


@contextmanager
def histogram_observes(histogram, min_observations=1):
    """
    Context manager to validate histogram observations.

    Usage:
        with histogram_observes(METRICS["extraction_duration"]):
            # Code that should record at least one timing observation
            pass
    """
    initial_count = get_histogram_count(histogram)

    yield

    actual_observations = get_histogram_count(histogram) - initial_count
    if actual_observations < min_observations:
        raise AssertionError(
            f"Expected at least {min_observations} histogram observations, but got {actual_observations}"
        )
