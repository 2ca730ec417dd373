"""Exceptions raised by pysysmon."""


class SampleError(Exception):
    """A counter source could not be read or parsed."""

    def __init__(self, family: str, reason: str) -> None:
        super().__init__(f"{family}: {reason}")
        self.family = family
        self.reason = reason
