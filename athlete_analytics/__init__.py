"""Physiological load and readiness analytics.

Pure computations over an athlete's daily time series:
- Weight trend smoothing and adaptive TDEE estimation
- Daily workload aggregation and ACWR risk bands
- Readiness scoring (MVP check-in and composite physiological strategies)
- Multi-signal risk flagging and roster triage

The engine performs no I/O; callers fetch rows and pass them in.
"""

import athlete_analytics.core.logger  # noqa: F401  (configures loguru sinks)

__version__ = "0.1.0"
