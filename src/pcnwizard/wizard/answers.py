"""Typed answer store for the wizard questionnaire.

Answers are kept as a tagged union (bool, text, set of option ids) keyed by
question id. The string encoding the analyzer expects (``"true"``/``"false"``
flags, comma-joined selections) only exists at the adapter boundary via
:meth:`Answers.to_wire`.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, RootModel

WIRE_DELIMITER = ","


class BoolAnswer(BaseModel):
    kind: Literal["bool"] = "bool"
    value: bool


class TextAnswer(BaseModel):
    kind: Literal["text"] = "text"
    value: str = ""


class SetAnswer(BaseModel):
    kind: Literal["set"] = "set"
    value: list[str] = Field(default_factory=list)


AnswerValue = Annotated[
    Union[BoolAnswer, TextAnswer, SetAnswer],
    Field(discriminator="kind"),
]


class Answers(RootModel[dict[str, AnswerValue]]):
    """Mapping of question id to a typed answer."""

    root: dict[str, AnswerValue] = Field(default_factory=dict)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self.root

    def __len__(self) -> int:
        return len(self.root)

    def keys(self) -> list[str]:
        return list(self.root)

    def set_bool(self, question_id: str, value: bool) -> None:
        self.root[question_id] = BoolAnswer(value=value)

    def set_text(self, question_id: str, value: str) -> None:
        self.root[question_id] = TextAnswer(value=value)

    def set_selection(self, question_id: str, values: list[str]) -> None:
        deduped = list(dict.fromkeys(values))
        self.root[question_id] = SetAnswer(value=deduped)

    def discard(self, question_id: str) -> None:
        self.root.pop(question_id, None)

    def get_bool(self, question_id: str) -> bool | None:
        answer = self.root.get(question_id)
        if isinstance(answer, BoolAnswer):
            return answer.value
        return None

    def is_true(self, question_id: str) -> bool:
        return self.get_bool(question_id) is True

    def get_text(self, question_id: str) -> str:
        answer = self.root.get(question_id)
        if isinstance(answer, TextAnswer):
            return answer.value
        return ""

    def get_selection(self, question_id: str) -> list[str]:
        answer = self.root.get(question_id)
        if isinstance(answer, SetAnswer):
            return list(answer.value)
        return []

    def toggle(self, question_id: str, option: str, maximum: int | None = None) -> bool:
        """Toggle ``option`` in a multi-select answer.

        Selected options are removed. A new option is added unless the
        selection is already at ``maximum``, in which case the toggle is
        ignored. Returns True if the selection changed.
        """
        selected = self.get_selection(question_id)
        if option in selected:
            selected.remove(option)
        elif maximum is not None and len(selected) >= maximum:
            return False
        else:
            selected.append(option)
        self.set_selection(question_id, selected)
        return True

    # -- wire shape -----------------------------------------------------------

    def to_wire(self) -> dict[str, str]:
        """Encode answers as the flat string map sent to the analyzer."""
        wire: dict[str, str] = {}
        for key, answer in self.root.items():
            if isinstance(answer, BoolAnswer):
                wire[key] = "true" if answer.value else "false"
            elif isinstance(answer, SetAnswer):
                wire[key] = WIRE_DELIMITER.join(answer.value)
            else:
                wire[key] = answer.value
        return wire

    @classmethod
    def from_wire(
        cls, data: dict[str, str], set_keys: frozenset[str] = frozenset()
    ) -> Answers:
        """Decode a flat string map. Keys in ``set_keys`` become selections."""
        answers = cls()
        for key, raw in data.items():
            if key in set_keys:
                answers.set_selection(key, [v for v in raw.split(WIRE_DELIMITER) if v])
            elif raw in ("true", "false"):
                answers.set_bool(key, raw == "true")
            else:
                answers.set_text(key, raw)
        return answers
