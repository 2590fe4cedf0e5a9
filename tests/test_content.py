import json

import pytest

from yoruba.core.exceptions import ValidationError
from yoruba.models.enums import ExerciseType
from yoruba.schemas.content import (
    MultipleChoiceContent,
    FillBlankContent,
    AudioContent,
    decode_exercise_content,
    encode_exercise_content,
)
from yoruba.schemas.exercise import PublicExercise
from yoruba.schemas.records import ExerciseRecord
from yoruba.services.answer_service import check_answer


class TestDecodeExerciseContent:

    def test_multiple_choice_from_stored_json(self):
        raw = json.dumps([
            {"id": 1, "text": "E kú àárọ̀", "isCorrect": True},
            {"id": 2, "text": "E kú alẹ́", "isCorrect": False},
        ])
        content = decode_exercise_content("multiple_choice", raw, None, None)

        assert isinstance(content, MultipleChoiceContent)
        assert content.correct_option.id == 1
        assert [option.text for option in content.options] == ["E kú àárọ̀", "E kú alẹ́"]

    def test_missing_ids_use_position(self):
        raw = json.dumps([{"text": "a"}, {"text": "b", "is_correct": True}])
        content = decode_exercise_content(ExerciseType.MULTIPLE_CHOICE, raw, None, None)
        assert [option.id for option in content.options] == [1, 2]
        assert content.correct_option.id == 2

    @pytest.mark.parametrize("flags", [[False, False], [True, True]])
    def test_multiple_choice_needs_exactly_one_correct_option(self, flags):
        raw = json.dumps([{"text": str(i), "isCorrect": flag} for i, flag in enumerate(flags)])
        with pytest.raises(ValidationError):
            decode_exercise_content("multiple_choice", raw, None, None)

    def test_invalid_json(self):
        with pytest.raises(ValidationError):
            decode_exercise_content("multiple_choice", "not json", None, None)

    def test_fill_blank_ignores_stored_options(self):
        raw = json.dumps([{"id": 1, "text": "Orúkọ mi ni ...", "isCorrect": True}])
        content = decode_exercise_content("fill_blank", raw, "Orúkọ mi ni ...", None)
        assert content == FillBlankContent(correct_answer="Orúkọ mi ni ...")

    def test_audio_keeps_reference(self):
        content = decode_exercise_content("audio", "[]", "Ọkan", "/audio/okan.mp3")
        assert content == AudioContent(audio_url="/audio/okan.mp3", correct_answer="Ọkan")

    def test_typed_answer_required(self):
        with pytest.raises(ValidationError):
            decode_exercise_content("audio", "[]", None, "/audio/okan.mp3")

    def test_encode_matches_stored_columns(self):
        content = decode_exercise_content("multiple_choice", json.dumps([{"text": "a", "isCorrect": True}]), None, None)
        exercise_type, options, correct_answer, audio_url = encode_exercise_content(content)
        assert exercise_type == ExerciseType.MULTIPLE_CHOICE
        assert json.loads(options) == [{"id": 1, "text": "a", "isCorrect": True}]
        assert correct_answer is None
        assert audio_url is None


class TestCheckAnswer:

    def test_multiple_choice_matches_option_id(self):
        content = decode_exercise_content(
            "multiple_choice", json.dumps([{"text": "a"}, {"text": "b", "isCorrect": True}]), None, None
        )
        assert check_answer(content, option_id=2)
        assert not check_answer(content, option_id=1)

    def test_typed_answers_must_match_exactly(self):
        content = FillBlankContent(correct_answer="Pupa")
        assert check_answer(content, answer="Pupa")
        assert not check_answer(content, answer="pupa")
        assert not check_answer(content, answer=" Pupa")

    def test_missing_field_for_type(self):
        with pytest.raises(ValidationError):
            check_answer(FillBlankContent(correct_answer="Pupa"), option_id=1)


def test_public_exercise_hides_answer_keys():
    content = decode_exercise_content(
        "multiple_choice", json.dumps([{"text": "a", "isCorrect": True}, {"text": "b"}]), None, None
    )
    public = PublicExercise.from_record(ExerciseRecord(id=7, level_id=3, question="Bom dia", content=content))
    dumped = public.model_dump()

    assert dumped["options"] == [{"id": 1, "text": "a"}, {"id": 2, "text": "b"}]
    assert "is_correct" not in json.dumps(dumped)

    typed = PublicExercise.from_record(
        ExerciseRecord(id=8, level_id=3, question="Meu nome é ...", content=FillBlankContent(correct_answer="x"))
    )
    assert "correct_answer" not in typed.model_dump()
