from typing import Any


class BaseEpubMetadataException(Exception):
    """Base class for all Exceptions raised by the epub metadata package."""

    def __init__(self, message: str | None = None):
        """Initializes a new instance of BaseEpubMetadataException class

        :param message: String containing description of the exception that occurred
        """
        super().__init__(message)
        self.message = message

    def __getstate__(self) -> dict[str, Any]:
        return {"dict": self.__dict__, "args": self.args}

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        # state is always a dict from __getstate__, but the signature must
        # accept None to match BaseException.__setstate__
        assert state is not None
        self.__dict__.update(state["dict"])
        self.args = state["args"]

    def __reduce__(self) -> tuple[Any, ...]:
        state = self.__getstate__()
        return self.__class__.__new__, (self.__class__,), state


class EpubMetadataValueError(BaseEpubMetadataException, ValueError): ...


class CannotLoadConfiguration(BaseEpubMetadataException):
    """The settings could not be loaded from the environment.

    The message lists every environment variable that failed validation,
    along with the reason it was rejected.
    """
