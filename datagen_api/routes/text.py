"""Text endpoints: lorem ipsum and curated readable paragraphs.

Endpoints:
    GET /lorem          words, sentences or paragraphs of filler text
    GET /readable_text  real-sounding paragraphs picked from a topic
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from datagen_api.dependencies import default_generator
from datagen_api.generators import GeneratorContext
from datagen_api.validation import LOREM_MAX_COUNT, parse_count

logger = logging.getLogger(__name__)
router = APIRouter(tags=["text"])

LOREM_MAX_NUM = 100

PARAGRAPHS: dict[str, list[str]] = {
    "general": [
        "Collaboration is key to successful project delivery. Utilizing shared workspaces and clear "
        "communication channels ensures that all team members are aligned and working towards common goals.",
        "User feedback provides invaluable insights for product improvement. Actively soliciting and "
        "analyzing user comments helps prioritize features and fix issues, leading to a more refined and "
        "user-centric product.",
        "Effective time management allows individuals and teams to prioritize tasks and achieve objectives "
        "efficiently. Breaking down large goals into smaller, manageable steps can improve focus and productivity.",
        "Continuous learning is essential in today's rapidly changing environment. Staying updated with new "
        "skills and knowledge helps maintain relevance and fosters personal and professional growth.",
    ],
    "technology": [
        "Explore the possibilities of modern web development with intuitive user interfaces and seamless "
        "backend integrations. Our platform provides the tools you need to build responsive and engaging "
        "applications efficiently.",
        "Scalable cloud architecture allows applications to handle growth gracefully. Designing systems that "
        "can adapt to increasing loads ensures reliability and maintains performance as user bases expand.",
        "API design principles emphasize consistency, clarity, and predictability. Well-designed APIs are "
        "easier for developers to understand, integrate, and maintain, fostering a positive developer experience.",
        "DevOps practices streamline the software development lifecycle by automating build, test, and "
        "deployment processes. This leads to faster release cycles and improved collaboration between "
        "development and operations teams.",
    ],
    "business": [
        "Understanding market trends is crucial for strategic decision-making. Analyzing competitor actions "
        "and consumer behavior helps businesses identify opportunities and navigate potential challenges effectively.",
        "Financial planning provides a roadmap for achieving business objectives. Budgeting, forecasting, and "
        "managing cash flow are essential components of sustainable financial health.",
        "Building strong customer relationships drives loyalty and long-term value. Providing excellent "
        "service and personalized experiences can differentiate a business in a competitive marketplace.",
        "Effective marketing strategies connect businesses with their target audience. Utilizing a mix of "
        "digital channels and traditional methods helps build brand awareness and generate qualified leads.",
    ],
    "design": [
        "Data visualization helps in understanding complex datasets by presenting information in a graphical "
        "format. Effective charts and graphs can reveal patterns, trends, and outliers that might otherwise go unnoticed.",
        "Accessibility should be a primary consideration in design and development. Creating products that are "
        "usable by everyone, regardless of ability, expands reach and improves the overall user experience.",
        "User interface (UI) design focuses on the visual presentation and interactivity of a product. "
        "Consistent layouts, clear typography, and intuitive navigation contribute to a positive user perception.",
        "User experience (UX) design encompasses all aspects of the end-user's interaction with the company, "
        "its services, and products. It aims to create seamless, enjoyable, and efficient interactions.",
    ],
}
DEFAULT_CONTEXT = "general"


@router.get("/lorem")
async def generate_lorem(
    count: str | None = None,
    text_type: str = Query(default="words", alias="type"),
    num: str | None = None,
    fake: GeneratorContext = Depends(default_generator),
):
    """Generate lorem ipsum text.

    Args:
        text_type: ``words`` (default), ``sentences`` or ``paragraphs``.
        num:       How many words/sentences/paragraphs per item (default 5).
    """
    n = parse_count(count, LOREM_MAX_COUNT)
    size = parse_count(num, LOREM_MAX_NUM, name="num") if num is not None else 5
    kind = text_type.lower()
    logger.info("Handling /lorem with count: %d, type: %s, num: %d", n, kind, size)

    def lorem() -> dict:
        if kind == "sentences":
            text = " ".join(fake.sentences(nb=size))
        elif kind == "paragraphs":
            text = "\n".join(fake.paragraphs(nb=size))
        else:
            text = " ".join(fake.words(nb=size))
        return {"text": text}

    return fake.produce(n, lorem)


@router.get("/readable_text")
async def generate_readable_text(
    count: str | None = None,
    context: str | None = None,
    fake: GeneratorContext = Depends(default_generator),
):
    """Pick paragraphs from a topic. Unknown topics fall back to ``general``."""
    topic = context.lower() if context else DEFAULT_CONTEXT
    paragraphs = PARAGRAPHS.get(topic, PARAGRAPHS[DEFAULT_CONTEXT])
    n = parse_count(count, len(paragraphs))
    logger.info("Handling /readable_text with context: %s, count: %d", topic, n)
    return fake.produce(n, lambda: {"text": fake.random_element(paragraphs)})
