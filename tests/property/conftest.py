"""Configuration for property-based tests.

Registers Hypothesis profiles; select one with ``--hypothesis-profile``.
"""

from hypothesis import HealthCheck, Verbosity, settings

settings.register_profile(
    "default",
    max_examples=100,
    deadline=5000,  # 5 seconds per test
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.data_too_large],
)

# CI or quick local runs
settings.register_profile(
    "fast",
    max_examples=30,
    deadline=2000,
    suppress_health_check=[
        HealthCheck.too_slow,
        HealthCheck.data_too_large,
        HealthCheck.filter_too_much,
    ],
)

settings.register_profile(
    "thorough",
    max_examples=500,
    deadline=10000,
    suppress_health_check=[HealthCheck.too_slow],
)

settings.register_profile(
    "debug",
    max_examples=10,
    deadline=None,
    verbosity=Verbosity.verbose,
    suppress_health_check=[
        HealthCheck.too_slow,
        HealthCheck.data_too_large,
        HealthCheck.filter_too_much,
    ],
)

settings.load_profile("default")
