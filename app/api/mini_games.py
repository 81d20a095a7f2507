from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.errors import NotFoundError, ValidationError
from app.core.role_guards import RequestContext, feature_guard, require_admin
from app.models.location import MiniGame
from app.schemas.catalog import MessageOut
from app.schemas.misc import MiniGameIn, MiniGameOut

router = APIRouter(
    prefix="/mini-games",
    tags=["mini-games"],
    dependencies=[Depends(feature_guard("ENABLE_MINI_GAMES"))],
)


def _get_game(db: Session, game_id: int) -> MiniGame:
    game = db.get(MiniGame, game_id)
    if not game:
        raise NotFoundError("Mini game")
    return game


@router.post("/", response_model=MiniGameOut, status_code=201)
def create_mini_game(
    payload: MiniGameIn,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MiniGameOut:
    count = int(db.scalar(select(func.count(MiniGame.id))) or 0)
    if count >= settings.MAX_MINI_GAMES:
        raise ValidationError("Collection limit reached")

    game = MiniGame(name=payload.name, value=payload.value, type=payload.type)
    db.add(game)
    db.commit()
    db.refresh(game)
    return MiniGameOut.model_validate(game)


@router.get("/", response_model=List[MiniGameOut])
def list_mini_games(db: Session = Depends(get_db)) -> List[MiniGameOut]:
    rows = db.scalars(select(MiniGame).order_by(MiniGame.id)).all()
    return [MiniGameOut.model_validate(r) for r in rows]


@router.put("/{game_id}", response_model=MiniGameOut)
def update_mini_game(
    game_id: int,
    payload: MiniGameIn,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MiniGameOut:
    game = _get_game(db, game_id)
    game.name = payload.name
    game.value = payload.value
    game.type = payload.type
    db.commit()
    db.refresh(game)
    return MiniGameOut.model_validate(game)


@router.delete("/{game_id}", response_model=MessageOut)
def delete_mini_game(
    game_id: int,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageOut:
    game = _get_game(db, game_id)
    db.delete(game)
    db.commit()
    return MessageOut(message="Mini game deleted successfully")
