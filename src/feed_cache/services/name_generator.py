"""LLM-backed baby name generation with a static fallback."""

import logging
import random

from feed_cache.data.fallback_names import FALLBACK_NAMES
from feed_cache.entities import NameEntity
from feed_cache.protocols import ChatProvider
from feed_cache.utils import extract_json

logger = logging.getLogger(__name__)

STYLE_HINTS = [
    "Focus on SHORT names (1 syllable preferred): Jake, Sam, Max, Cole, Seth, Ian, Jack, Luke, "
    "Mark, Paul, Pete, Tom, Joe, Nick, Pat, Drew, Troy, Wade, Dean, Jude, Finn, Leo, Lane, Reid, "
    "Beau, Clay, Trey, Grant, Blake, Chase, Brett, Shane, Cody, Kyle, Ryan",
    "Focus on CLASSIC names: Matthew, Michael, Christopher, Nicholas, Benjamin, Jonathan, Timothy, "
    "Stephen, Andrew, Peter, Thomas, David, Daniel, Joseph, Anthony, Vincent, Patrick, Dominic, "
    "Sebastian, Nathaniel, William, Robert, Richard, Edward, Charles, George, Henry, Philip, "
    "Lawrence, Francis",
    "Focus on TIMELESS names: James, John, Paul, Mark, Luke, Peter, Simon, Thomas, Philip, Andrew, "
    "Nathan, Aaron, Adam, Eric, Brian, Kevin, Sean, Scott, Craig, Keith, Alan, Carl, Dennis, Gary, "
    "Roger, Bruce, Glenn, Wayne, Dale, Neil",
    "Mix of SHORT and FULL names: Jake/Jacob, Sam/Samuel, Matt/Matthew, Mike/Michael, "
    "Nick/Nicholas, Ben/Benjamin, Dan/Daniel, Tom/Thomas, Joe/Joseph, Tim/Timothy, Steve/Stephen, "
    "Andy/Andrew, Pete/Peter, Chris/Christopher, Nate/Nathan, Zach/Zachary",
]

PROMPT_TEMPLATE = """Generate exactly {count} random Christian boy names that would be good for a baby born today.

RANDOM SEED: {seed} - Use this to vary your selections.
STYLE HINT: {style_hint}{avoid_list}

IMPORTANT RULES:
- Choose names that real parents actually use - nothing too unusual
- NO trendy misspellings (no Jaxon, Jaycen, Brayden, Kayden, Aiden variants)
- NO old-fashioned Biblical prophet/patriarch names (Ezekiel, Isaiah, Jeremiah, Obadiah, Elijah, Elisha, Micah, Amos, Hosea, Joel, Jonah, Nahum, Habakkuk, Zephaniah, Haggai, Zechariah, Malachi, Abraham, Moses, Gideon, Samson, etc.)
- NO Levi
- Names should have Christian/Biblical roots or meaning
- Keep meanings concise (under 10 words)
- Be RANDOM - pick different names each time

Respond with ONLY valid JSON:
{{"names": [{{"name": "Name1", "meaning": "meaning"}}, ...]}}"""


class NameGenerator:
    """Generates names with an LLM, falling back to a static list.

    ``generate`` never raises: any provider or parsing problem yields
    names from the static list instead, filtered against the recent list.
    """

    def __init__(
        self,
        provider: ChatProvider,
        rng: random.Random | None = None,
        max_tokens: int = 4000,
    ) -> None:
        """Initialize the generator.

        Args:
            provider: Chat completion provider
            rng: Random source for style hints, seeds and fallback shuffles
            max_tokens: Completion token budget per call
        """
        self._provider = provider
        self._rng = rng or random.Random()
        self._max_tokens = max_tokens

    def build_prompt(self, count: int, recent_names: list[str]) -> str:
        """Build the generation prompt with a random style and seed."""
        avoid_list = f"\nAVOID THESE RECENT NAMES: {', '.join(recent_names)}" if recent_names else ""
        return PROMPT_TEMPLATE.format(
            count=count,
            seed=self._rng.randrange(10000),
            style_hint=self._rng.choice(STYLE_HINTS),
            avoid_list=avoid_list,
        )

    async def generate(self, count: int, recent_names: list[str]) -> list[NameEntity]:
        """Generate ``count`` names, avoiding ``recent_names`` where possible.

        Args:
            count: Number of names wanted
            recent_names: Advisory exclusion list

        Returns:
            Exactly ``count`` names from the model, or up to ``count``
            names from the static fallback
        """
        try:
            content = await self._provider.complete(
                self.build_prompt(count, recent_names),
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.warning(f"Name generation request failed: {e!r}")
            content = None

        if content:
            names = parse_names(content)
            if len(names) >= count:
                logger.info(f"Generated {len(names)} names from {self._provider.model_name}")
                return names[:count]
            logger.warning(f"Model returned {len(names)} usable names, wanted {count}: {content[:200]!r}")

        return self.fallback(count, recent_names)

    def fallback(self, count: int, recent_names: list[str]) -> list[NameEntity]:
        """Pick up to ``count`` static names not in ``recent_names``, shuffled."""
        recent = set(recent_names)
        available = [NameEntity(name, meaning) for name, meaning in FALLBACK_NAMES if name not in recent]
        self._rng.shuffle(available)
        logger.info(f"Using {min(count, len(available))} fallback names")
        return available[:count]


def parse_names(content: str) -> list[NameEntity]:
    """Extract ``{"names": [{"name", "meaning"}, ...]}`` from model output.

    A bare list of entries is accepted too. Entries without a non-empty
    string name are dropped; a missing meaning becomes an empty string.
    """
    payload = extract_json(content)
    if isinstance(payload, dict):
        payload = payload.get("names")
    if not isinstance(payload, list):
        return []

    names = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        meaning = entry.get("meaning")
        names.append(NameEntity(name=name.strip(), meaning=str(meaning).strip() if meaning else ""))
    return names
