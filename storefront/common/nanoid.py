import string
from math import ceil, log
from os import urandom
from typing import TypeAlias

# Primary keys are prefixed with a short model abbreviation
# Examples: coll-XSqS5h9vFTSgP, prod-yb6GG995oiBfQ, ordr-kwA4kDkqoS8V7
NanoIdType: TypeAlias = str


def generate_custom_nanoid(size: int = 8, char_pool: str | None = None) -> NanoIdType:
    """
    Generate a short random url safe id
    Entropy here -> https://zelark.github.io/nano-id-cc/
    """
    if char_pool is None:
        char_pool = string.digits + string.ascii_letters

    char_pool_len = len(char_pool)
    mask = 1
    if char_pool_len > 1:
        mask = (2 << int(log(char_pool_len - 1) / log(2))) - 1
    step = int(ceil(1.6 * mask * size / char_pool_len))

    id = ''
    # Only keep bytes that land inside the character pool
    while True:
        random_bytes = bytearray(urandom(step))
        for i in range(step):
            random_byte = random_bytes[i] & mask
            if random_byte < char_pool_len:
                id += char_pool[random_byte]
                if len(id) == size:
                    return id


class NanoId:
    """
    ID used as primary key
    """

    _CHAR_SIZE = 13

    @classmethod
    def gen(cls, abbrev: str | None = None) -> NanoIdType:
        nano_id = generate_custom_nanoid(size=cls._CHAR_SIZE, char_pool=string.digits + string.ascii_letters)
        if abbrev:
            nano_id = f'{abbrev}-{nano_id}'

        return nano_id

    @classmethod
    def factory(cls, abbrev: str):
        """
        Default factory for pydantic fields and sqlalchemy column defaults
        """
        return lambda: cls.gen(abbrev=abbrev)
