"""System metric sources."""

from connectcheck_oled.data.sampler import NO_NETWORK, MetricsSampler, ReadOutcome, SystemSnapshot

__all__ = ["NO_NETWORK", "MetricsSampler", "ReadOutcome", "SystemSnapshot"]
