class IndexerError(Exception):
    """
    Base exception used as the parent class for all exceptions raised by this package.

    Calling code should catch `IndexerError` and derived classes separately before general
    exceptions, e.g.:

    ```
    try:
        indexer.handle(event)
    except UnknownEvent:
        ... # handle a specific exception
    except IndexerError:
        ... # handle non-specific indexer exception
    except Exception:
        ... # handle exceptions raised by 3rd party dependencies or Python built-ins
    ```

    An optional string-formatted message may be attached to the exception and retrieved by accessing
    the `.message` attribute.
    """

    message: str | None = None

    def __init__(self, message: str | None = None) -> None:
        if message:
            self.message = message
            super().__init__(message)

