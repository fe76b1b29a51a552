"""Record parser: shard bytes -> version records in file order."""

from crate_query_common import get_logger
from pydantic import ValidationError

from crate_index.errors import MalformedRecord
from crate_index.models import VersionRecord

logger = get_logger(__name__)


def parse_shard(data: bytes, skip_malformed: bool = False) -> list[VersionRecord]:
    """Decode a line-delimited index shard.

    Blank lines are skipped. By default the first bad line aborts the whole
    shard, since a partially decoded shard would give wrong answers.

    Args:
        data: Raw shard bytes
        skip_malformed: Log and drop bad lines instead of raising

    Returns:
        Version records in the order they appear in the shard

    Raises:
        MalformedRecord: On the first undecodable line (unless skipping)
    """
    records: list[VersionRecord] = []

    for line_number, line in enumerate(data.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(VersionRecord.model_validate_json(line))
        except ValidationError as e:
            error = MalformedRecord(line_number, _summarize(e))
            if not skip_malformed:
                raise error from e
            logger.warning("malformed_record_skipped", line=line_number, detail=error.detail)

    logger.debug("shard_parsed", records=len(records))
    return records


def _summarize(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid record")
    if error.error_count() > 1:
        message += f" (+{error.error_count() - 1} more)"
    return f"{location}: {message}" if location else message
