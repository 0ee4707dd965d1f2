class InitError(Exception):
    """
    Base class for schema initialization failures.
    - entry: the manifest entry (CollectionSpec / IndexSpec) that failed, if any
    - report: the InitReport completed before the failure
    """

    def __init__(self, message, entry=None, report=None):
        super().__init__(message)
        self.message = message
        self.entry = entry
        self.report = report

    def __str__(self):
        return self.message


class InvalidManifest(InitError):
    pass


class CollectionCreationFailed(InitError):
    pass


class IndexCreationFailed(InitError):
    pass


class InitTimeout(InitError):
    pass
