"""Module that contains data models."""
from .cluster import DuplicateCluster, GroupingResult
from .credential import (
    CredentialEntry,
    InvalidCredentialError,
    coerce_entries,
    login_identity,
    parse_login_content,
)
from .report import (
    BreachedEntry,
    CleanupReport,
    CleanupReportBuilder,
    ClusterSummary,
    HealthReport,
    ItemOutcome,
    MemberSummary,
    ReusedPassword,
    WeakEntry,
)
from .types import CredentialRecord, CredentialStore, DeleteFunction, ProgressCallback

__all__ = [
    "DuplicateCluster",
    "GroupingResult",
    "CredentialEntry",
    "InvalidCredentialError",
    "coerce_entries",
    "login_identity",
    "parse_login_content",
    "BreachedEntry",
    "CleanupReport",
    "CleanupReportBuilder",
    "ClusterSummary",
    "HealthReport",
    "ItemOutcome",
    "MemberSummary",
    "ReusedPassword",
    "WeakEntry",
    "CredentialRecord",
    "CredentialStore",
    "DeleteFunction",
    "ProgressCallback",
]
