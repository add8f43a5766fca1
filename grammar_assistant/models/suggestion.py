from pydantic import BaseModel, ConfigDict, model_validator
from typing import List, Literal, Optional

CheckMode = Literal["quick", "ai"]


class Suggestion(BaseModel):
    """One diagnosed issue, optionally anchored to a span of the checked text.

    ``start_index``/``length`` are offsets into the text that was checked
    (-1/0 when the issue is not localized). ``replacement_text`` is the
    mechanical fix for that span, ``corrected_text`` a whole-text correction.
    """
    model_config = ConfigDict(frozen=True)

    message: str
    detail: Optional[str] = None
    corrected_text: Optional[str] = None
    start_index: int = -1
    length: int = 0
    replacement_text: Optional[str] = None

    @model_validator(mode="after")
    def _fix_needs_span(self):
        if self.replacement_text is not None and (self.start_index < 0 or self.length <= 0):
            raise ValueError("replacement_text requires start_index >= 0 and length > 0")
        return self

    @property
    def end_index(self) -> int:
        return self.start_index + self.length

    @property
    def is_localized(self) -> bool:
        return self.start_index >= 0 and self.length > 0

    @property
    def is_fixable(self) -> bool:
        return self.replacement_text is not None and self.is_localized


class CheckResult(BaseModel):
    mode: CheckMode
    suggestions: List[Suggestion]
    corrected_text: Optional[str] = None
    from_cache: bool = False
