"""Native build orchestration module.

This module handles:
- Platform naming conventions and target resolution
- Running cargo
- Locating and publishing the compiled library
"""

from neon_build.builds.service import BuildOutcome, BuildPlan, build, plan_build

__all__ = ["BuildOutcome", "BuildPlan", "build", "plan_build"]
