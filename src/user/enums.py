from enum import StrEnum


class OtpType(StrEnum):
    LOGIN = "LOGIN"
    SIGNUP = "SIGNUP"
    RESET_PASSWORD = "RESET_PASSWORD"

    @classmethod
    def values(cls) -> set[str]:
        return {item.value for item in cls.__members__.values()}
