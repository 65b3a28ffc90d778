"""Recommendation endpoints: fused list, single recall paths, similar readers."""

import logging

from fastapi import APIRouter, Request

from shelfwise.models import RecommendationError

from ..models import RecommendationListResponse, SimilarUserItem, SimilarUsersResponse
from ..state import get_state
from ..utils import explanations_to_books, http_error, query_overrides

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{user_id}", response_model=RecommendationListResponse)
def recommend(user_id: int, request: Request):
    """Fused graph + semantic recommendations with display scores in [0, 10]."""
    state = get_state()
    overrides = query_overrides(request.query_params)
    try:
        books = state.engine.recommend(user_id, overrides, deadline=state.new_deadline())
    except RecommendationError as e:
        logger.info("[api] RECOMMEND_FAILED user_id=%s error=%s", user_id, e)
        raise http_error(e)
    mode = state.engine.config.merged(overrides).semantic_mode.value
    return RecommendationListResponse(
        books=books, total=len(books), strategy=f"graph+{mode}", user_id=user_id
    )


@router.get("/{user_id}/graph", response_model=RecommendationListResponse)
def recommend_graph(user_id: int, request: Request):
    """Personalized PageRank recommendations with collaborative explanations."""
    state = get_state()
    try:
        results = state.engine.recommend_graph(
            user_id, query_overrides(request.query_params), deadline=state.new_deadline()
        )
    except RecommendationError as e:
        raise http_error(e)
    books = explanations_to_books(results, state.catalog)
    return RecommendationListResponse(books=books, total=len(books), strategy="graph", user_id=user_id)


@router.get("/{user_id}/semantic", response_model=RecommendationListResponse)
def recommend_semantic(user_id: int, request: Request):
    state = get_state()
    try:
        results = state.engine.recommend_semantic(
            user_id, query_overrides(request.query_params), deadline=state.new_deadline()
        )
    except RecommendationError as e:
        raise http_error(e)
    books = explanations_to_books(results, state.catalog)
    return RecommendationListResponse(books=books, total=len(books), strategy="semantic", user_id=user_id)


@router.get("/{user_id}/ai", response_model=RecommendationListResponse)
def recommend_ai(user_id: int, request: Request):
    state = get_state()
    try:
        results = state.engine.recommend_ai(
            user_id, query_overrides(request.query_params), deadline=state.new_deadline()
        )
    except RecommendationError as e:
        raise http_error(e)
    books = explanations_to_books(results, state.catalog)
    return RecommendationListResponse(books=books, total=len(books), strategy="ai", user_id=user_id)


@router.get("/{user_id}/similar-users", response_model=SimilarUsersResponse)
def similar_users(user_id: int, topN: int = 10):
    """Readers ranked by Jaccard overlap of borrowed books."""
    state = get_state()
    top_n = topN if topN > 0 else 10
    users = [
        SimilarUserItem(**u.model_dump()) for u in state.engine.similar_users(user_id, top_n=top_n)
    ]
    return SimilarUsersResponse(users=users, total=len(users))
