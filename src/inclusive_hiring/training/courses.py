"""Skill training course catalog."""

from typing import List, Optional, Union

from inclusive_hiring.core.errors import InvalidArgumentError
from inclusive_hiring.core.models import CourseLevel, SkillCourse, SkillCourseDraft
from inclusive_hiring.storage.gateway import Collection, PersistenceGateway
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)


class SkillCourseCatalog:
    """Stores training courses and answers text / level searches over them."""

    def __init__(self, gateway: PersistenceGateway):
        self.logger = logger.bind(component="skill_courses")
        self.gateway = gateway

    async def add_course(self, draft: SkillCourseDraft) -> SkillCourse:
        name = draft.name.strip()
        if not name:
            raise InvalidArgumentError("Course name must not be empty", details={"field": "name"})

        data = draft.model_dump(mode="json")
        data["name"] = name
        course_id = await self.gateway.insert(Collection.SKILL_COURSES, data)
        self.logger.info("Skill course added", course_id=course_id, level=draft.level.value)
        return SkillCourse.from_record(await self.gateway.get(Collection.SKILL_COURSES, course_id))

    async def search_courses(
        self,
        text: Optional[str] = None,
        level: Optional[Union[CourseLevel, str]] = None
    ) -> List[SkillCourse]:
        """
        Courses whose name or description contains ``text`` (case-insensitive)
        and whose level equals ``level``. Omitted predicates match everything.
        """
        filters = {}
        if level is not None:
            try:
                filters["level"] = CourseLevel(level).value
            except ValueError as e:
                raise InvalidArgumentError(
                    f"Unknown course level: {level!r}",
                    details={"allowed": [item.value for item in CourseLevel]}
                ) from e

        records = await self.gateway.query(Collection.SKILL_COURSES, **filters)
        courses = [SkillCourse.from_record(record) for record in records]
        if not text:
            return courses

        needle = text.lower()
        return [
            course for course in courses
            if needle in course.name.lower() or needle in course.description.lower()
        ]
