import struct
from typing import Optional

from Mongo_Dumper.blockchain.constants import Constants
from Mongo_Dumper.blockchain.blockchainerror import ChainRecordDecodeError
from Mongo_Dumper.blockchain.chaintypes import BlockHash, PKID


class ByteReader:
    """
    Cursor over a stored value or key slice.

    Reads the node's native record layout:
      - Fixed width integers are big-endian.
      - Counts and lengths are unsigned varints (7 bits per byte, low group first).
      - Byte strings are length-prefixed.
      - Optional fields are preceded by a one-byte presence flag.

    Any short read or malformed field raises ChainRecordDecodeError.
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._offset = 0

    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read(self, size: int) -> bytes:
        if size < 0 or self._offset + size > len(self._data):
            raise ChainRecordDecodeError(
                f"Need {size} bytes at offset {self._offset}, only {self.remaining()} left."
            )
        chunk = self._data[self._offset:self._offset + size]
        self._offset += size
        return chunk

    # ----------------------------
    # Fixed Width Integers
    # ----------------------------
    def read_uint8(self) -> int:
        return self.read(1)[0]

    def read_uint32(self) -> int:
        return struct.unpack(">I", self.read(Constants.UINT32_SIZE_BYTES))[0]

    def read_uint64(self) -> int:
        return struct.unpack(">Q", self.read(Constants.UINT64_SIZE_BYTES))[0]

    def read_bool(self) -> bool:
        flag = self.read_uint8()
        if flag not in (0, 1):
            raise ChainRecordDecodeError(f"Invalid boolean byte {flag} at offset {self._offset - 1}.")
        return flag == 1

    def read_uvarint(self) -> int:
        result = 0
        shift = 0
        for index in range(Constants.MAX_UVARINT_BYTES):
            byte = self.read_uint8()
            if byte < 0x80:
                if index == Constants.MAX_UVARINT_BYTES - 1 and byte > 1:
                    raise ChainRecordDecodeError("Varint overflows 64 bits.")
                return result | (byte << shift)
            result |= (byte & 0x7F) << shift
            shift += 7
        raise ChainRecordDecodeError("Varint overflows 64 bits.")

    # ----------------------------
    # Variable Length Fields
    # ----------------------------
    def read_var_bytes(self) -> bytes:
        size = self.read_uvarint()
        if size > self.remaining():
            raise ChainRecordDecodeError(
                f"Length prefix {size} exceeds the {self.remaining()} bytes left."
            )
        return self.read(size)

    def read_var_string(self) -> str:
        raw = self.read_var_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ChainRecordDecodeError(f"Invalid UTF-8 string field: {e}") from e

    def read_hash(self) -> BlockHash:
        return BlockHash(self.read(Constants.HASH_SIZE_BYTES))

    def read_optional_hash(self) -> Optional[BlockHash]:
        if not self.read_bool():
            return None
        return self.read_hash()

    def read_pkid(self) -> PKID:
        return PKID(self.read(Constants.PUBLIC_KEY_SIZE_BYTES))

    def read_count(self) -> int:
        """Read an element count, rejecting counts that cannot fit in what is left."""
        count = self.read_uvarint()
        if count > self.remaining():
            raise ChainRecordDecodeError(f"Element count {count} exceeds remaining data.")
        return count

    def expect_end(self):
        if self.remaining():
            raise ChainRecordDecodeError(f"{self.remaining()} unexpected trailing bytes.")


class ByteWriter:
    """Builds values in the same layout ByteReader consumes."""

    def __init__(self):
        self._buffer = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def write(self, data: bytes) -> "ByteWriter":
        self._buffer.extend(data)
        return self

    def write_uint8(self, value: int) -> "ByteWriter":
        return self.write(struct.pack(">B", value))

    def write_uint32(self, value: int) -> "ByteWriter":
        return self.write(struct.pack(">I", value))

    def write_uint64(self, value: int) -> "ByteWriter":
        return self.write(struct.pack(">Q", value))

    def write_bool(self, value: bool) -> "ByteWriter":
        return self.write_uint8(1 if value else 0)

    def write_uvarint(self, value: int) -> "ByteWriter":
        if value < 0:
            raise ValueError("Varints must be non-negative.")
        while value >= 0x80:
            self._buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self._buffer.append(value)
        return self

    def write_var_bytes(self, data: bytes) -> "ByteWriter":
        self.write_uvarint(len(data))
        return self.write(data)

    def write_var_string(self, text: str) -> "ByteWriter":
        return self.write_var_bytes(text.encode("utf-8"))

    def write_hash(self, block_hash: BlockHash) -> "ByteWriter":
        return self.write(bytes(block_hash))

    def write_optional_hash(self, block_hash: Optional[BlockHash]) -> "ByteWriter":
        if block_hash is None:
            return self.write_bool(False)
        self.write_bool(True)
        return self.write_hash(block_hash)

    def write_pkid(self, pkid: PKID) -> "ByteWriter":
        return self.write(bytes(pkid))


def read_uint64_be(data: bytes) -> int:
    """Decode an 8-byte big-endian unsigned integer (value or key slice)."""
    if len(data) != Constants.UINT64_SIZE_BYTES:
        raise ChainRecordDecodeError(f"Expected 8 bytes for uint64, got {len(data)}.")
    return struct.unpack(">Q", data)[0]


def read_uint32_be(data: bytes) -> int:
    if len(data) != Constants.UINT32_SIZE_BYTES:
        raise ChainRecordDecodeError(f"Expected 4 bytes for uint32, got {len(data)}.")
    return struct.unpack(">I", data)[0]
