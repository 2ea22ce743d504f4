"""
Error taxonomy for CoursePath.

Every error raised by the classroom core and the data-access layer derives
from CoursePathError so the Streamlit shell can catch one type, show a
message and leave state unchanged.
"""


class CoursePathError(Exception):
    """Base class for all CoursePath errors."""


class AuthenticationRequired(CoursePathError):
    """No resolvable session, or the backend rejected the credentials."""


class StoreUnavailable(CoursePathError):
    """The data store failed a read or write. The cause is chained."""


class MalformedInput(CoursePathError):
    """Inconsistent tree/index, invalid row from the store, or invalid form input."""
