"""
Exercise content variants.

The exercise table keeps options as a JSON text column; these models are the
decoded form handed to the services layer. Decoding happens once, at the
storage boundary, through decode_exercise_content.
"""
from pydantic import BaseModel, Field
from typing import Annotated, List, Optional, Union, Literal, Tuple
import json

from yoruba.core.exceptions import ValidationError
from yoruba.models.enums import ExerciseType


class ChoiceOption(BaseModel):
    """One option of a multiple choice exercise."""
    id: int
    text: str
    is_correct: bool = False


class MultipleChoiceContent(BaseModel):
    """Multiple choice: exactly one option is correct."""
    type: Literal["multiple_choice"] = "multiple_choice"
    options: List[ChoiceOption]

    @property
    def correct_option(self) -> ChoiceOption:
        return next(option for option in self.options if option.is_correct)


class FillBlankContent(BaseModel):
    """Fill in the blank: the typed answer must equal correct_answer."""
    type: Literal["fill_blank"] = "fill_blank"
    correct_answer: str


class AudioContent(BaseModel):
    """Listen and type: the typed answer must equal correct_answer."""
    type: Literal["audio"] = "audio"
    audio_url: Optional[str] = None
    correct_answer: str


ExerciseContent = Annotated[
    Union[MultipleChoiceContent, FillBlankContent, AudioContent],
    Field(discriminator="type"),
]


def _parse_options(raw_options: Optional[str]) -> list:
    if not raw_options:
        return []
    try:
        parsed = json.loads(raw_options)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Exercise options are not valid JSON: {e}")
    if not isinstance(parsed, list):
        raise ValidationError("Exercise options must be a JSON list")
    return parsed


def decode_exercise_content(
    exercise_type: Union[ExerciseType, str],
    raw_options: Optional[str],
    correct_answer: Optional[str],
    audio_url: Optional[str],
) -> Union[MultipleChoiceContent, FillBlankContent, AudioContent]:
    """
    Decode the stored columns of an exercise into its content variant.

    Options without an explicit id get their 1-based position. Both the
    stored camelCase ``isCorrect`` key and ``is_correct`` are accepted.

    Raises:
        ValidationError: If the stored data does not form a valid exercise
    """
    exercise_type = ExerciseType(exercise_type)

    if exercise_type == ExerciseType.MULTIPLE_CHOICE:
        options = []
        for index, item in enumerate(_parse_options(raw_options), start=1):
            if not isinstance(item, dict) or "text" not in item:
                raise ValidationError(f"Option {index} must be an object with a 'text' field")
            options.append(ChoiceOption(
                id=item.get("id", index),
                text=item["text"],
                is_correct=bool(item.get("isCorrect", item.get("is_correct", False))),
            ))
        correct_count = sum(1 for option in options if option.is_correct)
        if correct_count != 1:
            raise ValidationError(
                f"Multiple choice exercises need exactly one correct option, found {correct_count}"
            )
        return MultipleChoiceContent(options=options)

    if correct_answer is None:
        raise ValidationError(f"{exercise_type.value} exercises need a correct_answer")

    if exercise_type == ExerciseType.FILL_BLANK:
        return FillBlankContent(correct_answer=correct_answer)

    return AudioContent(audio_url=audio_url, correct_answer=correct_answer)


def encode_exercise_content(
    content: Union[MultipleChoiceContent, FillBlankContent, AudioContent],
) -> Tuple[ExerciseType, str, Optional[str], Optional[str]]:
    """Inverse of decode_exercise_content: (type, options JSON, correct_answer, audio_url)."""
    if isinstance(content, MultipleChoiceContent):
        options = [
            {"id": option.id, "text": option.text, "isCorrect": option.is_correct}
            for option in content.options
        ]
        return ExerciseType.MULTIPLE_CHOICE, json.dumps(options, ensure_ascii=False), None, None
    if isinstance(content, FillBlankContent):
        return ExerciseType.FILL_BLANK, "[]", content.correct_answer, None
    return ExerciseType.AUDIO, "[]", content.correct_answer, content.audio_url
