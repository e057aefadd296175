from dashboard.database.models import ProcessedRecord

NO_USER_KEY = "null"


def user_key(record: ProcessedRecord) -> str:
    return record.user_id or NO_USER_KEY


def group_by_user(records: list[ProcessedRecord]) -> dict[str, list[ProcessedRecord]]:
    """Partition records by owning user, newest first within each partition.

    Keys iterate in the order each user first appears in the input. Records
    sharing a timestamp keep their input order.
    """
    groups: dict[str, list[ProcessedRecord]] = {}
    for record in records:
        groups.setdefault(user_key(record), []).append(record)
    return {
        key: sorted(group, key=lambda record: record.created_at, reverse=True)
        for key, group in groups.items()
    }
