import httpx
import logging
from typing import Optional, List, Dict, Any
from animez.core import settings
from animez.core.schemas.anime import Anime

logger = logging.getLogger(__name__)


class JikanService:
    """Read-only client for the Jikan (MyAnimeList) API.

    Upstream failures are logged and reported as empty results.
    """

    def __init__(self, base_url: str = None, timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.base_url = (base_url or settings.JIKAN_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.JIKAN_TIMEOUT
        self.transport = transport

    async def _get(self, path: str, params: Dict[str, Any] = None) -> Optional[Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                return response.json().get("data")
        except httpx.HTTPError as e:
            logger.error(f"Jikan request {path} failed: {e}")
            return None
        except ValueError as e:
            logger.error(f"Jikan returned invalid JSON for {path}: {e}")
            return None

    def _parse_list(self, data) -> List[Anime]:
        items = []
        for raw in data or []:
            try:
                items.append(Anime.model_validate(raw))
            except ValueError as e:
                logger.warning(f"Skipping malformed Jikan entry: {e}")
        return items

    def _parse_one(self, data) -> Optional[Anime]:
        if not data:
            return None
        try:
            return Anime.model_validate(data)
        except ValueError as e:
            logger.error(f"Malformed Jikan entry: {e}")
            return None

    async def search_anime(self, query: str, limit: int = 10) -> List[Anime]:
        data = await self._get(
            "/anime",
            params={"q": query, "limit": limit, "order_by": "popularity", "sort": "asc"},
        )
        return self._parse_list(data)

    async def get_top_anime(self, limit: int = 25) -> List[Anime]:
        data = await self._get("/top/anime", params={"limit": limit})
        return self._parse_list(data)

    async def get_anime_by_id(self, mal_id: int) -> Optional[Anime]:
        return self._parse_one(await self._get(f"/anime/{mal_id}"))

    async def get_random_anime(self) -> Optional[Anime]:
        return self._parse_one(await self._get("/random/anime"))


# Create global instance
jikan_service = JikanService()
