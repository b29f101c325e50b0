from .version import (
    ErrorCategory as ErrorCategory,
    ErrorSeverity as ErrorSeverity,
    VersionError as VersionError,
    VersionParseError as VersionParseError,
    FeatureHistoryError as FeatureHistoryError,
    DuplicateFeatureAddError as DuplicateFeatureAddError,
    DuplicateFeatureRemoveError as DuplicateFeatureRemoveError,
    RemoveBeforeAddError as RemoveBeforeAddError,
    AddAtMinimumError as AddAtMinimumError,
    MissingFeatureError as MissingFeatureError,
    IncompatibleVersionError as IncompatibleVersionError,
)
