import base64

import base58  # Requires the 'base58' package to be installed

from Mongo_Dumper.blockchain.constants import Constants


class DataEncoding:
    """
    Handles the string encodings used in mirrored documents:
      - Bytes → Hexadecimal
      - Bytes → Base64
      - Bytes → UTF-8
      - Public key → Base58Check (mainnet and testnet)
    """

    @staticmethod
    def bytes_to_hex(data: bytes) -> str:
        return bytes(data).hex()

    @staticmethod
    def bytes_to_base64(data: bytes) -> str:
        return base64.b64encode(bytes(data)).decode("utf-8")

    @staticmethod
    def bytes_to_utf8(data: bytes) -> str:
        """
        Convert bytes to a UTF-8 string.
        Invalid sequences become U+FFFD so arbitrary payloads still render.
        """
        return bytes(data).decode("utf-8", errors="replace")

    @staticmethod
    def pk_to_string(public_key: bytes, network: str = "mainnet") -> str:
        """
        Base58Check-encode a public key with the network's 3-byte prefix.
        The checksum is the first 4 bytes of a double SHA-256.
        """
        prefix = Constants.NETWORK_PUBLIC_KEY_PREFIXES[network]
        return base58.b58encode_check(prefix + bytes(public_key)).decode("ascii")

    @staticmethod
    def pk_to_string_both(public_key: bytes) -> str:
        """Return '<mainnet>:<testnet>' so either network's key can be matched."""
        return (
            f"{DataEncoding.pk_to_string(public_key, 'mainnet')}:"
            f"{DataEncoding.pk_to_string(public_key, 'testnet')}"
        )

    @staticmethod
    def bson_safe_int(value: int):
        """Keep integers BSON can store; larger unsigned counters become decimal strings."""
        if Constants.MIN_BSON_INT <= value <= Constants.MAX_BSON_INT:
            return value
        return str(value)

    @staticmethod
    def document_key(name: str) -> str:
        """BSON keys cannot hold NUL; such keys are stored as the hex of their UTF-8 bytes."""
        if "\x00" in name:
            return name.encode("utf-8").hex()
        return name

    @staticmethod
    def bytes_to_document_key(data: bytes) -> str:
        """Map key bytes that are valid UTF-8 as text, anything else as hex."""
        try:
            return DataEncoding.document_key(bytes(data).decode("utf-8"))
        except UnicodeDecodeError:
            return DataEncoding.bytes_to_hex(data)
