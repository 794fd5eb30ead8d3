"""Object keys derived from a job name."""

from dataclasses import dataclass

STARTED_EXT = ".started"
OK_EXT = ".ok"
ERROR_EXT = ".error"
ARTIFACT_EXT = ".bz2.crypt"


@dataclass(frozen=True)
class JobKeys:
    """The marker and artifact keys of one transfer job."""

    name: str

    def __post_init__(self):
        if not self.name:
            raise ValueError("Job name must not be empty")

    @property
    def started(self) -> str:
        return self.name + STARTED_EXT

    @property
    def ok(self) -> str:
        return self.name + OK_EXT

    @property
    def error(self) -> str:
        return self.name + ERROR_EXT

    @property
    def artifact(self) -> str:
        return self.name + ARTIFACT_EXT
