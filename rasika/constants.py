"""Selectable catalog values shared by the request schemas and the prompts."""

from typing import Dict, List

MOODS: Dict[str, str] = {
    "happy": "Happy",
    "calm": "Calm",
    "excited": "Excited",
    "energetic": "Energetic",
    "thoughtful": "Thoughtful",
    "melancholy": "Melancholy",
}

CONTENT_TYPES: Dict[str, str] = {
    "movie": "Movies",
    "tvShow": "TV Shows",
    "anime": "Anime",
    "book": "Books",
    "music": "Music",
    "podcast": "Podcasts",
}

# content types whose ratings come from IMDb / MyAnimeList
SCREEN_CONTENT_TYPES = ("movie", "tvShow", "anime")

RECOMMENDATION_COUNT = 4

UNTITLED_RECOMMENDATION = "Untitled Recommendation"
UNKNOWN_CONTENT_TYPE = "unknown"
NO_SUMMARY = "No summary available."

ANY_RATING = "any_rating"
ANY_LANGUAGE = "any_language"

IMDB_RATING_OPTIONS: List[str] = [ANY_RATING, "7.0", "7.5", "8.0", "8.5", "9.0"]

SUPPORTED_LANGUAGES: List[str] = [ANY_LANGUAGE, "English", "Spanish", "Korean", "Hindi", "French"]

# genre id -> (label, applicable content types)
GENRES: Dict[str, tuple] = {
    "action": ("Action", ("movie", "tvShow", "anime")),
    "adventure": ("Adventure", ("movie", "tvShow", "anime", "book")),
    "comedy": ("Comedy", ("movie", "tvShow", "anime", "book", "podcast")),
    "drama": ("Drama", ("movie", "tvShow", "anime", "book")),
    "fantasy": ("Fantasy", ("movie", "tvShow", "anime", "book")),
    "historical": ("Historical", ("movie", "tvShow", "anime", "book")),
    "horror": ("Horror", ("movie", "tvShow", "anime", "book")),
    "mystery": ("Mystery", ("movie", "tvShow", "anime", "book", "podcast")),
    "romance": ("Romance", ("movie", "tvShow", "anime", "book")),
    "sci-fi": ("Sci-Fi", ("movie", "tvShow", "anime", "book")),
    "thriller": ("Thriller", ("movie", "tvShow", "anime", "book")),
    "crime": ("Crime", ("movie", "tvShow", "book", "podcast")),
    "war": ("War", ("movie", "tvShow", "book")),
    "western": ("Western", ("movie", "tvShow", "book")),
    "animation": ("Animation (General)", ("movie", "tvShow")),
    "family": ("Family", ("movie", "tvShow")),
    "shonen": ("Shonen", ("anime",)),
    "shojo": ("Shojo", ("anime",)),
    "seinen": ("Seinen", ("anime",)),
    "josei": ("Josei", ("anime",)),
    "isekai": ("Isekai", ("anime",)),
    "slice-of-life": ("Slice of Life", ("anime", "book")),
    "mecha": ("Mecha", ("anime",)),
    "magical-girl": ("Magical Girl", ("anime",)),
    "sports-anime": ("Sports (Anime)", ("anime",)),
    "biography": ("Biography", ("book", "movie")),
    "contemporary-lit": ("Contemporary Lit", ("book",)),
    "dystopian": ("Dystopian", ("book", "movie", "tvShow")),
    "graphic-novel": ("Graphic Novel", ("book",)),
    "historical-fiction": ("Historical Fiction", ("book",)),
    "literary-fiction": ("Literary Fiction", ("book",)),
    "memoir": ("Memoir", ("book",)),
    "non-fiction": ("Non-Fiction", ("book", "podcast")),
    "poetry": ("Poetry", ("book",)),
    "self-help": ("Self-Help", ("book", "podcast")),
    "short-stories": ("Short Stories", ("book",)),
    "young-adult": ("Young Adult (YA)", ("book", "movie", "tvShow")),
    "childrens-lit": ("Children's Lit", ("book", "movie", "tvShow")),
    "pop": ("Pop", ("music",)),
    "rock": ("Rock", ("music",)),
    "hip-hop": ("Hip Hop / Rap", ("music",)),
    "electronic": ("Electronic / Dance", ("music",)),
    "r-n-b": ("R&B / Soul", ("music",)),
    "jazz": ("Jazz", ("music",)),
    "classical": ("Classical", ("music",)),
    "country": ("Country", ("music",)),
    "folk": ("Folk / Acoustic", ("music",)),
    "metal": ("Metal", ("music",)),
    "punk": ("Punk", ("music",)),
    "blues": ("Blues", ("music",)),
    "reggae": ("Reggae", ("music",)),
    "latin": ("Latin", ("music",)),
    "k-pop": ("K-Pop", ("music",)),
    "ambient": ("Ambient", ("music",)),
    "instrumental": ("Instrumental", ("music",)),
    "soundtrack": ("Soundtrack / Score", ("music",)),
    "news-podcast": ("News & Politics", ("podcast",)),
    "true-crime-podcast": ("True Crime", ("podcast",)),
    "interview-podcast": ("Interview", ("podcast",)),
    "educational-podcast": ("Educational", ("podcast", "book")),
    "storytelling-podcast": ("Storytelling / Narrative", ("podcast", "book")),
    "technology-podcast": ("Technology", ("podcast",)),
    "business-podcast": ("Business", ("podcast",)),
    "health-podcast": ("Health & Fitness", ("podcast",)),
    "spirituality-podcast": ("Spirituality & Religion", ("podcast",)),
    "arts-podcast": ("Arts & Culture", ("podcast",)),
    "sports-podcast": ("Sports (Podcast)", ("podcast",)),
    "parenting-podcast": ("Parenting", ("podcast",)),
    "history-podcast": ("History (Podcast)", ("podcast",)),
    "documentary": ("Documentary", ("movie", "tvShow", "podcast")),
}


def genre_label(genre_id: str) -> str:
    """Return the display label for a genre id, or the id itself if unknown."""
    entry = GENRES.get(genre_id)
    return entry[0] if entry else genre_id


def genres_for_content_types(content_types) -> List[str]:
    """Genre ids applicable to at least one of the given content types."""
    wanted = set(content_types or [])
    return [gid for gid, (_, applies_to) in GENRES.items() if wanted.intersection(applies_to)]
