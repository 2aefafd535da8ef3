import enum
from typing import Any


class BaseEnum(str, enum.Enum):
    """
    String backed enum, values are persisted as-is in varchar columns
    """

    @classmethod
    def has(cls, item: Any) -> bool:
        try:
            cls(item)
        except ValueError:
            return False
        return True

    @classmethod
    def list_all(cls) -> list[str]:
        return [e.value for e in cls]

    @classmethod
    def describe(cls) -> str:
        # Used for column comments and error messages
        return ', '.join(cls.list_all())

    def __str__(self) -> str:
        return str(self.value)
