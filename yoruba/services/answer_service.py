"""
Server-side answer evaluation.
"""
import logging
from typing import Optional, Union

from yoruba.core.exceptions import ValidationError
from yoruba.schemas.content import MultipleChoiceContent, FillBlankContent, AudioContent

logger = logging.getLogger(__name__)


def check_answer(
    content: Union[MultipleChoiceContent, FillBlankContent, AudioContent],
    option_id: Optional[int] = None,
    answer: Optional[str] = None
) -> bool:
    """
    Decide whether a submitted answer is correct.

    Multiple choice answers are matched on the option id. Fill-in-the-blank
    and audio answers must equal the stored answer exactly; no trimming or
    case folding is applied.

    Raises:
        ValidationError: If the submission does not carry the field the
            exercise type needs
    """
    if isinstance(content, MultipleChoiceContent):
        if option_id is None:
            raise ValidationError("option_id is required for multiple_choice exercises")
        return option_id == content.correct_option.id

    if answer is None:
        raise ValidationError(f"answer is required for {content.type} exercises")
    return answer == content.correct_answer
