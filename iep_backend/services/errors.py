# FILE: iep_backend/services/errors.py
"""
Error taxonomy for the memory query pipeline
"""


class IEPBackendError(Exception):
    """Base class for backend errors"""


class InputError(IEPBackendError):
    """Required request fields are missing"""


class StoreUnavailable(IEPBackendError):
    """The IEP data store could not be read or written"""


class DataUnavailable(IEPBackendError):
    """Context could not be assembled because the store read failed"""


class ValidationRejected(IEPBackendError):
    """Generated answer failed the output policy"""

    def __init__(self, answer: str, reason: str):
        super().__init__(reason)
        self.answer = answer
        self.reason = reason


class ShareWriteFailed(IEPBackendError):
    """Persisting a shared memory failed after all checks passed"""
