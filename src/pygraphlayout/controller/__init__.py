"""Controller layer for pygraphlayout.

This module provides the drivers that advance iterative layouts:

- LayoutRunner: QThread worker stepping a layout until it converges
- RunnerConfig: Options for the runner
"""

from pygraphlayout.controller.runner import LayoutRunner, RunnerConfig

__all__ = [
    "LayoutRunner",
    "RunnerConfig",
]
