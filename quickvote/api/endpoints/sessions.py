"""Session endpoints."""
from fastapi import APIRouter, Depends, Request

from quickvote.api.deps import get_session_service
from quickvote.core.rate_limit import limiter, RATE_LIMITS
from quickvote.schemas import (
    CreateSessionResponse,
    SessionCreate,
    SessionDetail,
    SessionResults,
    VoteRequest,
    VoterStatus,
)
from quickvote.services.sessions import SessionService

router = APIRouter()


@router.post("", response_model=CreateSessionResponse, status_code=201)
@limiter.limit(RATE_LIMITS["create_session"])
async def create_session_endpoint(
    request: Request,
    payload: SessionCreate,
    service: SessionService = Depends(get_session_service),
):
    """
    Create a new voting session.

    The session gets a short random id that forms the shareable link. It
    accepts votes for 30 days, after which it is deleted.

    Args:
        request: FastAPI Request (for rate limiting)
        payload: Question, options, optional dates and the selection rule
        service: Session service (injected)

    Returns:
        CreateSessionResponse with the new sessionId and the empty session

    Raises:
        400: Empty question, fewer than 2 options, fewer options than
             voteCount, unknown voteMode, or an empty/invalid dates list

    Example:
        Request:
            POST /api/sessions
            {
                "question": "Where should we eat?",
                "options": ["Tacos", "Pho", "Pizza"],
                "dates": ["2025-01-01", "2025-01-02"],
                "voteCount": 2,
                "voteMode": "exactly"
            }

        Response (201):
            {
                "sessionId": "k3x9q2a",
                "session": {"id": "k3x9q2a", "question": "Where should we eat?", ..., "votes": {}}
            }

        Response (400):
            {
                "error": "Not enough options to vote on"
            }
    """
    session = service.create_session(
        payload.question,
        payload.options,
        payload.dates,
        payload.vote_count,
        payload.vote_mode,
    )
    return CreateSessionResponse(session_id=session.id, session=session)


@router.get("/{session_id}", response_model=SessionDetail)
@limiter.limit(RATE_LIMITS["read_session"])
async def get_session_endpoint(
    request: Request,
    session_id: str,
    service: SessionService = Depends(get_session_service),
):
    """
    Get a session with every vote keyed by voter id.

    Clients call this on load and after reconnecting to the realtime channel,
    since updates missed while disconnected are not replayed.

    Raises:
        404: Unknown or expired session
    """
    return service.get_session(session_id)


@router.post("/{session_id}/vote", response_model=SessionDetail)
@limiter.limit(RATE_LIMITS["vote"])
async def vote_endpoint(
    request: Request,
    session_id: str,
    vote_request: VoteRequest,
    service: SessionService = Depends(get_session_service),
):
    """
    Submit a vote and get the refreshed session back.

    Every client viewing the session receives the same snapshot as a
    sessionUpdate event.

    Args:
        request: FastAPI Request (for rate limiting)
        session_id: Session to vote in
        vote_request: Voter name and id, chosen options, chosen dates
        service: Session service (injected)

    Returns:
        SessionDetail including this vote and any concurrent ones

    Raises:
        400: Wrong number of options, unknown option or date, missing dates,
             or the voter already voted
        404: Unknown or expired session

    Example:
        Request:
            POST /api/sessions/k3x9q2a/vote
            {
                "voterName": "Sam",
                "voterId": "a8f3k2j9x0q1z",
                "choices": ["Tacos", "Pho"],
                "dates": ["2025-01-02"]
            }

        Response (400):
            {
                "error": "Must select exactly 2 options"
            }

    Note:
        voteMode and voteCount sent by older clients are ignored; the rule
        stored with the session is always the one enforced.
    """
    return await service.submit_vote(
        session_id,
        vote_request.voter_id,
        vote_request.voter_name,
        vote_request.choices,
        vote_request.dates,
    )


@router.get("/{session_id}/results", response_model=SessionResults)
@limiter.limit(RATE_LIMITS["read_session"])
async def results_endpoint(
    request: Request,
    session_id: str,
    service: SessionService = Depends(get_session_service),
):
    """Per-option and per-date tallies, most voted first."""
    return service.get_results(session_id)


@router.get("/{session_id}/voters/{voter_id}", response_model=VoterStatus)
@limiter.limit(RATE_LIMITS["read_session"])
async def voter_status_endpoint(
    request: Request,
    session_id: str,
    voter_id: str,
    service: SessionService = Depends(get_session_service),
):
    """Whether this voter id already voted, so the client can go straight to results."""
    return VoterStatus(has_voted=service.has_voted(session_id, voter_id))
