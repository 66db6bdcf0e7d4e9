from enum import Enum


class EnvironmentName(Enum):
    TESTING = "test"
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def is_local(self) -> bool:
        return self in (EnvironmentName.TESTING, EnvironmentName.DEVELOPMENT)
