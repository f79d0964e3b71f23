"""Continuous-integration detection from process environment variables.

The checks follow the conventions most CI services document: a generic `CI`
flag (any value other than "false"/"0"), the older `CONTINUOUS_INTEGRATION`,
`BUILD_NUMBER` / `RUN_ID` counters, and a handful of vendor-specific markers
for services that do not export `CI` on every runner.
"""

from __future__ import annotations

from collections.abc import Mapping

# Vendor markers that are set on CI runners even when `CI` is not.
VENDOR_VARIABLES: tuple[str, ...] = (
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "CIRCLECI",
    "TRAVIS",
    "JENKINS_URL",
    "BUILDKITE",
    "DRONE",
    "TEAMCITY_VERSION",
    "TF_BUILD",
    "BITBUCKET_BUILD_NUMBER",
    "CODEBUILD_BUILD_ID",
    "APPVEYOR",
    "SEMAPHORE",
)

_FALSY = {"", "0", "false", "no", "off"}


def _truthy(raw: str | None) -> bool:
    return raw is not None and raw.strip().lower() not in _FALSY


def detect_ci(environ: Mapping[str, str]) -> bool:
    """Return True when `environ` looks like a CI runner.

    Parameters
    ----------
    environ:
        Usually ``os.environ``; tests pass a plain dict.
    """
    if "CI" in environ:
        return _truthy(environ["CI"])
    if _truthy(environ.get("CONTINUOUS_INTEGRATION")):
        return True
    if environ.get("BUILD_NUMBER") or environ.get("RUN_ID"):
        return True
    return any(_truthy(environ.get(name)) for name in VENDOR_VARIABLES)


__all__ = ["VENDOR_VARIABLES", "detect_ci"]
