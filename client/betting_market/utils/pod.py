from typing import Any

from podite import BYTES_CATALOG, JSON_CATALOG
from podite.bytes import BytesPodConverter
from podite.json import JsonPodConverter
from solders.pubkey import Pubkey

PUBKEY_LEN = 32


class PubkeyBytesConverter(BytesPodConverter):
    def get_mapping(self, type_):
        if type_ is Pubkey:
            return self
        return None

    def is_static(self, type_) -> bool:
        return True

    def calc_size(self, type_, obj, **kwargs) -> int:
        return PUBKEY_LEN

    def calc_max_size(self, type_) -> int:
        return PUBKEY_LEN

    def pack_partial(self, type_, buffer, obj, **kwargs) -> Any:
        buffer.write(bytes(obj))

    def unpack_partial(self, type_, buffer, **kwargs) -> Any:
        raw = buffer.read(PUBKEY_LEN)
        if len(raw) != PUBKEY_LEN:
            raise ValueError(f"Buffer length is {len(raw)}, but expected {PUBKEY_LEN}")
        return Pubkey(raw)


class PubkeyJsonConverter(JsonPodConverter):
    def get_mapping(self, type_):
        if type_ is Pubkey:
            return self
        return None

    def pack_dict(self, type_, obj, **kwargs) -> Any:
        return str(obj)

    def unpack_dict(self, type_, obj, **kwargs) -> Any:
        return Pubkey.from_string(obj)


BYTES_CATALOG.register(PubkeyBytesConverter().get_mapping)
JSON_CATALOG.register(PubkeyJsonConverter().get_mapping)
