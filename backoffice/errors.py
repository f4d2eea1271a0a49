class BackofficeError(Exception):
    pass


class ValidationError(BackofficeError):
    pass


class NotFound(BackofficeError):
    def __init__(self, entity: str, identifier):
        super().__init__(f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class StorageError(BackofficeError):
    # the driver error is chained as __cause__
    pass
