from typing import Dict

from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class MessageEntry:
    def __init__(self, sender_public_key: bytes, recipient_public_key: bytes, encrypted_text: bytes,
                 tstamp_nanos: int):
        self.sender_public_key = sender_public_key
        self.recipient_public_key = recipient_public_key
        self.encrypted_text = encrypted_text
        self.tstamp_nanos = tstamp_nanos

    @classmethod
    def from_bytes(cls, data: bytes) -> "MessageEntry":
        reader = ByteReader(data)
        entry = cls(reader.read_var_bytes(), reader.read_var_bytes(), reader.read_var_bytes(), reader.read_uint64())
        reader.expect_end()
        return entry

    def to_bytes(self) -> bytes:
        return (
            ByteWriter()
            .write_var_bytes(self.sender_public_key)
            .write_var_bytes(self.recipient_public_key)
            .write_var_bytes(self.encrypted_text)
            .write_uint64(self.tstamp_nanos)
            .getvalue()
        )

    def to_dict(self) -> Dict:
        return {
            "SenderPublicKey": self.sender_public_key,
            "RecipientPublicKey": self.recipient_public_key,
            "EncryptedText": self.encrypted_text,
            "TstampNanos": self.tstamp_nanos,
        }
