from timetabler.models.course import Course  # noqa: F401
from timetabler.models.lecturer import Lecturer  # noqa: F401
from timetabler.models.schedule_entry import ScheduleEntry  # noqa: F401
from timetabler.models.venue import Venue, VenueType  # noqa: F401
