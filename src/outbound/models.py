"""Outgoing message variants accepted by the payload compiler."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ActionOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    value: str


class Action(BaseModel):
    """A question action: a reply button or a select menu."""

    model_config = ConfigDict(frozen=True)

    type: str  # "button" | "select"
    text: str
    value: str = ""
    options: list[ActionOption] = Field(default_factory=list)


class PlainText(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["question"] = "question"
    text: str
    actions: list[Action] = Field(default_factory=list)


class ButtonTemplate(BaseModel):
    """Interactive button message whose buttons are already in provider shape."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["button_template"] = "button_template"
    text: str
    buttons: list[dict[str, Any]] = Field(default_factory=list)


class TextTemplate(BaseModel):
    """Any other template kind; only its rendered text is sent."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text_template"] = "text_template"
    text: str


class AttachmentRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str  # "image" | "video" | "audio" | "file"
    url: str


class Attachment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["attachment"] = "attachment"
    text: str = ""
    attachment: AttachmentRef | None = None


OutgoingMessage = Annotated[
    PlainText | Question | ButtonTemplate | TextTemplate | Attachment,
    Field(discriminator="kind"),
]

outgoing_message_adapter: TypeAdapter[OutgoingMessage] = TypeAdapter(OutgoingMessage)
