# photo_album/batch.py
import json
from dataclasses import asdict, dataclass


@dataclass
class BatchResult:
    """Counts of what one invocation did with the records it was given."""
    processed: int = 0
    skipped: int = 0
    failed: int = 0

    def as_response(self) -> dict:
        return {"statusCode": 200, "body": json.dumps(asdict(self))}
