"""Named queries issued by the samples."""

from typing import Dict

NOT_ANDERSEN = "SELECT * FROM Family WHERE Family.lastName != 'Andersen'"

BY_LAST_NAME = (
    "SELECT * FROM Family WHERE Family.lastName IN ('Andersen', 'Wakefield', 'Johnson')"
)

# Families with at least one boy and no district, newest first
BOYS_WITHOUT_DISTRICT = (
    "SELECT VALUE root FROM (SELECT DISTINCT i FROM i "
    "JOIN (SELECT DISTINCT VALUE c FROM c IN i.children WHERE c.gender = 'male') "
    "WHERE i.district = null) AS root ORDER BY root.i._ts DESC"
)

NAMED_QUERIES: Dict[str, str] = {
    "not-andersen": NOT_ANDERSEN,
    "by-last-name": BY_LAST_NAME,
    "boys-without-district": BOYS_WITHOUT_DISTRICT,
}


def resolve_query(name_or_sql: str) -> str:
    """
    Map a query name to its SQL text.

    Anything that is not a known name is returned as raw SQL.

    Raises:
        ValueError: If the input is empty
    """
    if not name_or_sql or not name_or_sql.strip():
        raise ValueError("Query cannot be empty")
    key = name_or_sql.strip()
    return NAMED_QUERIES.get(key.lower(), key)
