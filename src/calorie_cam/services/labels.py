"""Reduce classifier concepts to a short food query."""

from collections.abc import Iterable

from calorie_cam.domain.vision import VisualConcept

MIN_CONFIDENCE = 0.4
MAX_LABELS = 3
# Shorter names only match by containing a keyword ("car" is not "carrot").
MIN_FRAGMENT_LENGTH = 4

FOOD_KEYWORDS: tuple[str, ...] = (
    "food",
    "fruit",
    "vegetable",
    "meat",
    "bread",
    "pasta",
    "rice",
    "pizza",
    "burger",
    "sandwich",
    "apple",
    "banana",
    "chicken",
    "beef",
    "fish",
    "salad",
    "soup",
    "cheese",
    "egg",
    "potato",
    "tomato",
    "lettuce",
    "carrot",
    "broccoli",
    "corn",
    "bean",
    "nut",
    "berry",
    "cake",
    "cookie",
    "meal",
    "dinner",
    "lunch",
    "breakfast",
    "snack",
    "dish",
    "cuisine",
    "beverage",
    "drink",
)


def extract_food_labels(
    concepts: Iterable[VisualConcept],
    keywords: Iterable[str] = FOOD_KEYWORDS,
) -> list[str]:
    """Return up to three lowercase food labels, keeping the classifier order."""
    vocabulary = tuple(keywords)
    labels: list[str] = []
    for concept in concepts:
        if concept.confidence <= MIN_CONFIDENCE:
            continue
        name = concept.name.lower()
        if not _is_food_name(name, vocabulary):
            continue
        labels.append(name)
        if len(labels) == MAX_LABELS:
            break
    return labels


def build_food_query(labels: list[str]) -> str:
    """Join labels into the comma-separated nutrition query."""
    return ", ".join(labels)


def _is_food_name(name: str, vocabulary: tuple[str, ...]) -> bool:
    if any(keyword in name for keyword in vocabulary):
        return True
    if len(name) < MIN_FRAGMENT_LENGTH:
        return False
    return any(name in keyword for keyword in vocabulary)
