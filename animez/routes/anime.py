from fastapi import APIRouter, HTTPException, Query, status
from typing import List

from animez.core.schemas import Anime
from animez.core.jikan import jikan_service

router = APIRouter(prefix="/anime", tags=["anime"])


@router.get("/search", response_model=List[Anime])
async def search_anime(
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=25)
):
    """Search anime titles to tag a post with."""
    return await jikan_service.search_anime(q.strip(), limit=limit)


@router.get("/top", response_model=List[Anime])
async def top_anime(limit: int = Query(25, ge=1, le=25)):
    """Top-rated anime."""
    return await jikan_service.get_top_anime(limit=limit)


@router.get("/random", response_model=Anime)
async def random_anime():
    anime = await jikan_service.get_random_anime()
    if not anime:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Anime not found"
        )
    return anime


@router.get("/{mal_id}", response_model=Anime)
async def read_anime(mal_id: int):
    anime = await jikan_service.get_anime_by_id(mal_id)
    if not anime:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Anime not found"
        )
    return anime
