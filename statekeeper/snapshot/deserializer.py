import flatted
from pydantic import ValidationError

from ..exceptions import CorruptSnapshot
from .models import FORMAT_VERSION, StoredSnapshot


class SnapshotDeserializer:
    """
    Rebuild a stored snapshot from raw store bytes.

    Shared and cyclic references written by ``SnapshotSerializer`` are
    restored as the same objects. Anything that is not a well-formed envelope
    of a supported version raises ``CorruptSnapshot``; callers decide whether
    that means "start fresh".
    """

    @staticmethod
    def deserialize(data: bytes | str) -> StoredSnapshot:
        try:
            text = data.decode("utf-8") if isinstance(data, bytes) else data
            raw = flatted.parse(text)
        except UnicodeDecodeError as e:
            raise CorruptSnapshot(f"Snapshot is not valid UTF-8: {e}") from e
        except (ValueError, TypeError, IndexError, KeyError, AttributeError) as e:
            raise CorruptSnapshot(f"Snapshot is not a valid encoded envelope: {e}") from e

        if not isinstance(raw, dict):
            raise CorruptSnapshot(f"Expected an object, got {type(raw).__name__}")

        version = raw.get("version")
        if version != FORMAT_VERSION:
            raise CorruptSnapshot(f"Unsupported snapshot format version: {version!r}")

        try:
            return StoredSnapshot.model_validate(raw)
        except ValidationError as e:
            raise CorruptSnapshot(f"Malformed snapshot envelope: {e}") from e
