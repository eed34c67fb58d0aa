"""The fixed catalog of character filter tags."""

FILTER_TAGS: tuple[str, ...] = (
    "Realistic",
    "Anime",
    "Fantasy",
    "Sci-Fi",
    "Modern",
    "Friendly",
    "Mysterious",
    "Romantic",
    "Playful",
    "Serious",
    "Funny",
    "Intellectual",
    "Adventurous",
    "Caring",
    "Young Adult",
    "Mature",
    "MILF",
    "Girlfriend",
    "Boyfriend",
    "Teacher",
    "Student",
    "Asian",
    "European",
    "Slim",
    "Curvy",
)
