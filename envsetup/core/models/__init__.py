"""
Domain models — Pydantic types for envsetup.

All models are re-exported here for convenient access:

    from envsetup.core.models import SetupProfile, ReconciliationResult, SetupReport
"""

from envsetup.core.models.outcome import (
    FileWriteOutcome,
    ManagerStatus,
    MirrorStatus,
    PrerequisiteStatus,
    ProfileEdit,
    StageRecord,
)
from envsetup.core.models.profile import (
    MirrorSpec,
    PackageSetSpec,
    ProfileEditSpec,
    SetupProfile,
    ToolchainSpec,
)
from envsetup.core.models.report import SetupReport
from envsetup.core.models.result import (
    DesiredPackageSet,
    PackageOutcome,
    PackageStatus,
    ReconciliationResult,
)

__all__ = [
    # outcome.py
    "FileWriteOutcome",
    "ManagerStatus",
    "MirrorStatus",
    "PrerequisiteStatus",
    "ProfileEdit",
    "StageRecord",
    # profile.py
    "MirrorSpec",
    "PackageSetSpec",
    "ProfileEditSpec",
    "SetupProfile",
    "ToolchainSpec",
    # report.py
    "SetupReport",
    # result.py
    "DesiredPackageSet",
    "PackageOutcome",
    "PackageStatus",
    "ReconciliationResult",
]
