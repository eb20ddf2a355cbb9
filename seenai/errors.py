class SeenAIError(Exception):
    """Base class for every error raised by the SeenAI backend."""


class Unauthenticated(SeenAIError):
    def __init__(self, message: str = "You must be signed in to upload videos."):
        super().__init__(message)


class ValidationError(SeenAIError):
    """A submission is missing required data. `fields` names what is missing."""

    def __init__(self, fields: list[str], message: str = None):
        self.fields = list(fields)
        if message is None:
            message = f"Missing required field(s): {', '.join(self.fields)}."
        super().__init__(message)


class StorageWriteError(SeenAIError):
    pass


class MetadataWriteError(SeenAIError):
    pass


class AnalysisServiceError(SeenAIError):
    pass


class InvalidArgument(SeenAIError):
    pass
