class GuardianError(Exception):
    """Base class for errors reported to the operator."""


class InvalidDirectory(GuardianError):
    def __init__(self, directory):
        self.directory = directory
        super().__init__(f"Provided path is not a valid directory: {directory}")


class BaselineMissing(GuardianError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"No baseline found at {path}. Run 'snapshot' command first.")


class BaselineCorrupt(GuardianError):
    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Baseline {path} is corrupt: {reason}")


class WatchSubscriptionFailure(GuardianError):
    def __init__(self, directory, cause):
        self.directory = directory
        self.cause = cause
        super().__init__(f"Could not watch {directory} for changes: {cause}")


class WatchChannelClosed(GuardianError):
    def __init__(self):
        super().__init__("Filesystem notification channel closed")


class ConfigurationError(GuardianError):
    pass


class BaselineUnreadable(GuardianError):
    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read baseline {path}: {cause}")


class BaselineWriteFailure(GuardianError):
    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write baseline {path}: {cause}")
