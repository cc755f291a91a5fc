from pydantic import BaseModel
from enum import Enum
from uuid import UUID
from typing import Optional, List


class GameStateModel(str, Enum):
    idle = "idle"
    playing = "playing"
    scanning = "scanning"
    won = "won"
    timed_out = "timed_out"


class NewGameModel(BaseModel):
    level: Optional[int] = None  # falls back to HEIST_DEFAULT_LEVEL
    time_mode: bool = False


class InsertModel(BaseModel):
    index: int
    value: int


class DeleteModel(BaseModel):
    index: int


class SearchModel(BaseModel):
    pattern: str | List[int]  # "1,7,3" or [1, 7, 3]


class ResetModel(BaseModel):
    level: Optional[int] = None  # None keeps the current level


class TimeModeModel(BaseModel):
    enabled: bool


class FeedbackModel(BaseModel):
    category: str
    message: str
    cue: Optional[str] = None


class HighlightModel(BaseModel):
    indices: List[int]
    category: str
    duration_ms: int


class MoveModel(BaseModel):
    item_id: int
    from_index: int
    to_index: int


class LayoutDiffModel(BaseModel):
    unchanged: List[int]
    moved: List[MoveModel]
    created: List[int]
    removed: List[int]


class SlotModel(BaseModel):
    index: int
    item_id: Optional[int] = None
    value: Optional[int] = None


class SecretModel(BaseModel):
    display_digits: List[int]  # reversed at level 3, never the stored order
    label: str
    reversed_for_display: bool
    length: int


class StateModel(BaseModel):
    game_id: UUID
    state: GameStateModel
    level: int
    time_mode: bool
    time_left: int
    time_limit: int
    clock_started: bool
    scanning: bool
    won: bool
    slots: List[SlotModel]
    secret: Optional[SecretModel] = None
    message: FeedbackModel


class VerdictModel(BaseModel):
    found: bool
    start: Optional[int] = None


class ScanStepModel(BaseModel):
    position: int
    indices: List[int]
    window: List[Optional[int]]
    matched: bool
    category: str


class OperationResultModel(BaseModel):
    status: str
    ok: bool
    error: Optional[str] = None
    item_id: Optional[int] = None
    feedback: FeedbackModel
    highlight: Optional[HighlightModel] = None
    layout_diff: Optional[LayoutDiffModel] = None
    verdict: Optional[VerdictModel] = None
    state: StateModel


class GameCreatedModel(BaseModel):
    game_id: UUID
    state: StateModel
