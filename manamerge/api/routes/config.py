"""GET /api/v1/config — expose game configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from manamerge.api.dependencies import get_engine_manager
from manamerge.api.engine_manager import EngineManager
from manamerge.api.schemas import GameConfigResponse

router = APIRouter()


@router.get("/config", response_model=GameConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> GameConfigResponse:
    cfg = manager.config
    return GameConfigResponse(
        seed=cfg.seed,
        board_width=cfg.board_width,
        board_height=cfg.board_height,
        max_tier=cfg.max_tier,
        hostile_tick_seconds=cfg.hostile_tick_seconds,
        accrual_seconds=cfg.accrual_seconds,
        save_debounce_seconds=cfg.save_debounce_seconds,
        save_max_wait_seconds=cfg.save_max_wait_seconds,
        combo_step_delay=cfg.combo_step_delay,
        base_rate=cfg.base_rate,
        rate_growth=cfg.rate_growth,
        boost_multiplier=cfg.boost_multiplier,
        boost_seconds=cfg.boost_seconds,
        barrier_seconds=cfg.barrier_seconds,
        save_path=cfg.save_path,
    )
