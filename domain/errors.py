# -*- coding: utf-8 -*-


class TrackerError(Exception):
    """Base for every error raised by the tracker."""


class ValidationError(TrackerError, ValueError):
    pass


class AlreadyRunningError(ValidationError):
    pass


class NoActiveSessionError(ValidationError):
    def __init__(self, msg: str = "no active session"):
        super().__init__(msg)


class AlreadyOnBreakError(ValidationError):
    def __init__(self, msg: str = "break already running"):
        super().__init__(msg)


class NoActiveBreakError(ValidationError):
    def __init__(self, msg: str = "no active break"):
        super().__init__(msg)


class InvalidSettingError(ValidationError):
    pass


class ClockSkewError(TrackerError, ValueError):
    pass


class PersistenceError(TrackerError, OSError):
    pass


class CorruptStateError(TrackerError):
    def __init__(self, path, reason: str):
        super().__init__(f"state file {path} is corrupt: {reason}")
        self.path = path
        self.reason = reason


class IdleProbeError(TrackerError, RuntimeError):
    pass
