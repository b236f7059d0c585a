# chunkworld/errors.py

"""Exception types raised by the chunk generation pipeline."""


class ChunkWorldError(Exception):
    """Base class for every error raised by chunkworld."""


class ConfigurationError(ChunkWorldError, ValueError):
    """Invalid generator parameters. Raised before any chunk is generated."""


class ChunkGenerationError(ChunkWorldError, RuntimeError):
    """
    An unexpected fault while generating one chunk.

    The failure is local to ``chunk_coord``; sibling chunks are unaffected and
    re-running the same coordinate is safe.
    """

    def __init__(self, chunk_coord, reason: str):
        self.chunk_coord = chunk_coord
        self.reason = reason
        super().__init__(f"Chunk ({chunk_coord.x}, {chunk_coord.z}) failed: {reason}")

    def __reduce__(self):
        return (type(self), (self.chunk_coord, self.reason))
