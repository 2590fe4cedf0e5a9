"""
Learner-facing exercise schemas.

These never carry answer keys: multiple choice options lose their
correctness flag and fill_blank/audio exercises lose their correct answer.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from yoruba.models.enums import ExerciseType
from yoruba.schemas.content import MultipleChoiceContent, AudioContent
from yoruba.schemas.records import ExerciseRecord


class PublicOption(BaseModel):
    """Option as shown to the learner."""
    id: int
    text: str


class PublicExercise(BaseModel):
    """Exercise as shown to the learner."""
    id: int
    level_id: int
    question: str
    type: ExerciseType
    options: List[PublicOption] = []
    audio_url: Optional[str] = None

    @classmethod
    def from_record(cls, exercise: ExerciseRecord) -> "PublicExercise":
        content = exercise.content
        options = []
        audio_url = None
        if isinstance(content, MultipleChoiceContent):
            options = [PublicOption(id=option.id, text=option.text) for option in content.options]
        elif isinstance(content, AudioContent):
            audio_url = content.audio_url
        return cls(
            id=exercise.id,
            level_id=exercise.level_id,
            question=exercise.question,
            type=exercise.type,
            options=options,
            audio_url=audio_url
        )


class ExercisesResponse(BaseModel):
    """All exercises of a level."""
    level_id: int
    exercises: List[PublicExercise]


class StartLevelRequest(BaseModel):
    """Request to start or resume a level."""
    user_id: int = Field(..., description="User ID")
    level_id: int = Field(..., description="Level to enter")


class StartLevelResponse(BaseModel):
    """Next exercise of a level, or the level's completion."""
    level_id: int
    exercise: Optional[PublicExercise] = None
    progress: int = Field(..., description="Exercises of the level already attempted")
    total_exercises: int
    level_completed: bool = False
    all_exercises_done: bool = False
    xp_earned: int = 0
    diamonds_earned: int = 0
    next_level_id: Optional[int] = None


class SubmitAnswerRequest(BaseModel):
    """
    Answer submission.

    Either pass ``correct`` directly or let the server evaluate ``option_id``
    (multiple_choice) or ``answer`` (fill_blank, audio).
    """
    user_id: int = Field(..., description="User ID")
    level_id: int = Field(..., description="Level the exercise was served from")
    exercise_id: int = Field(..., description="Answered exercise")
    correct: Optional[bool] = Field(None, description="Correctness decided by the client")
    option_id: Optional[int] = Field(None, description="Chosen option for multiple_choice")
    answer: Optional[str] = Field(None, description="Typed answer for fill_blank and audio")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": 1,
                "level_id": 1,
                "exercise_id": 3,
                "option_id": 2
            }
        }


class SubmitAnswerResponse(BaseModel):
    """Outcome of one attempt."""
    correct: bool
    level_completed: bool = False
    all_exercises_done: bool = False
    xp_earned: int = 0
    diamonds_earned: int = 0
    next_level_id: Optional[int] = None
    next_exercise: Optional[PublicExercise] = None
    progress: int
    total_exercises: int
    lives: int
    next_life_at: Optional[datetime] = None
    out_of_lives: bool = False
