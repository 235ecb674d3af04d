import structlog
from sqlalchemy.orm import Session

from ..application.dto import NewCourse
from .models import CourseORM
from .repositories import CourseRepository

logger = structlog.get_logger()

# rating/reviews/students у демо-курсов стартуют с нуля: это производные поля
SAMPLE_COURSES = [
    NewCourse(
        title="Complete JavaScript Bootcamp",
        description="Master JavaScript from basics to advanced concepts. Learn ES6+, async programming, "
                    "DOM manipulation, and modern frameworks.",
        instructor="John Smith",
        category="programming",
        level="beginner",
        price=89.99,
        original_price=149.99,
        duration="40 hours",
        image="https://images.pexels.com/photos/2004161/pexels-photo-2004161.jpeg?auto=compress&cs=tinysrgb&w=400",
    ),
    NewCourse(
        title="UI/UX Design Masterclass",
        description="Learn modern UI/UX design principles, user research, wireframing, prototyping, "
                    "and design systems using Figma.",
        instructor="Sarah Johnson",
        category="design",
        level="intermediate",
        price=79.99,
        original_price=129.99,
        duration="35 hours",
        image="https://images.pexels.com/photos/196644/pexels-photo-196644.jpeg?auto=compress&cs=tinysrgb&w=400",
    ),
    NewCourse(
        title="Digital Marketing Strategy",
        description="Comprehensive guide to digital marketing including SEO, social media, "
                    "content marketing, and analytics.",
        instructor="Mike Brown",
        category="marketing",
        level="beginner",
        price=69.99,
        duration="28 hours",
        image="https://images.pexels.com/photos/270408/pexels-photo-270408.jpeg?auto=compress&cs=tinysrgb&w=400",
    ),
    NewCourse(
        title="Business Strategy & Leadership",
        description="Essential business strategy, leadership skills, team management, "
                    "and organizational development.",
        instructor="Emily Davis",
        category="business",
        level="advanced",
        price=99.99,
        original_price=179.99,
        duration="50 hours",
        image="https://images.pexels.com/photos/3184339/pexels-photo-3184339.jpeg?auto=compress&cs=tinysrgb&w=400",
    ),
    NewCourse(
        title="Python for Data Science",
        description="Learn Python programming for data analysis, machine learning, and data visualization "
                    "using pandas, numpy, and matplotlib.",
        instructor="Dr. Robert Wilson",
        category="programming",
        level="intermediate",
        price=94.99,
        duration="45 hours",
        image="https://images.pexels.com/photos/574071/pexels-photo-574071.jpeg?auto=compress&cs=tinysrgb&w=400",
    ),
    NewCourse(
        title="Graphic Design Fundamentals",
        description="Master the basics of graphic design, typography, color theory, and layout "
                    "using Adobe Creative Suite.",
        instructor="Lisa Anderson",
        category="design",
        level="beginner",
        price=59.99,
        original_price=99.99,
        duration="32 hours",
        image="https://images.pexels.com/photos/196644/pexels-photo-196644.jpeg?auto=compress&cs=tinysrgb&w=400",
    ),
]


def seed_courses(db: Session) -> int:
    if db.query(CourseORM.id).first() is not None:
        return 0
    repo = CourseRepository(db)
    for course in SAMPLE_COURSES:
        repo.create(course)
    db.commit()
    logger.info("Sample courses seeded", count=len(SAMPLE_COURSES))
    return len(SAMPLE_COURSES)
