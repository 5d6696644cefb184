from Mongo_Dumper.utils.serialization import ByteReader, ByteWriter


class BlockHeader:
    """Header of a stored block, as persisted inside blocks and block nodes."""

    def __init__(self, version, prev_block_hash, transaction_merkle_root, tstamp_secs, height, nonce, extra_nonce=0):
        self.version = version
        self.prev_block_hash = prev_block_hash
        self.transaction_merkle_root = transaction_merkle_root
        self.tstamp_secs = tstamp_secs
        self.height = height
        self.nonce = nonce
        self.extra_nonce = extra_nonce

    def to_dict(self):
        return {
            "Version": self.version,
            "PrevBlockHash": self.prev_block_hash,
            "TransactionMerkleRoot": self.transaction_merkle_root,
            "TstampSecs": self.tstamp_secs,
            "Height": self.height,
            "Nonce": self.nonce,
            "ExtraNonce": self.extra_nonce,
        }

    @classmethod
    def read_from(cls, reader: ByteReader) -> "BlockHeader":
        return cls(
            version=reader.read_uint32(),
            prev_block_hash=reader.read_hash(),
            transaction_merkle_root=reader.read_hash(),
            tstamp_secs=reader.read_uint64(),
            height=reader.read_uint64(),
            nonce=reader.read_uint64(),
            extra_nonce=reader.read_uint64(),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "BlockHeader":
        reader = ByteReader(data)
        header = cls.read_from(reader)
        reader.expect_end()
        return header

    def to_bytes(self) -> bytes:
        return (
            ByteWriter()
            .write_uint32(self.version)
            .write_hash(self.prev_block_hash)
            .write_hash(self.transaction_merkle_root)
            .write_uint64(self.tstamp_secs)
            .write_uint64(self.height)
            .write_uint64(self.nonce)
            .write_uint64(self.extra_nonce)
            .getvalue()
        )

    def __repr__(self):
        """
        Debug-friendly representation.
        """
        return (
            f"BlockHeader(version={self.version}, height={self.height}, "
            f"prev_block_hash={str(self.prev_block_hash)[:10]}..., "
            f"merkle_root={str(self.transaction_merkle_root)[:10]}..., nonce={self.nonce}, "
            f"tstamp_secs={self.tstamp_secs})"
        )
