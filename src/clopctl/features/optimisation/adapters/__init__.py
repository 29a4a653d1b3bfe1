"""Adapters plugging concrete mechanisms into the optimisation ports."""

from .progress_source import ChannelProgressSource, NullProgressSource, SubscriptionHandle
from .service_launcher import NoopServiceLauncher, SubprocessServiceLauncher

__all__ = [
    "ChannelProgressSource",
    "NoopServiceLauncher",
    "NullProgressSource",
    "SubprocessServiceLauncher",
    "SubscriptionHandle",
]
