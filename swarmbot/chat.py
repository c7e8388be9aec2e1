"""Chat messages: parsing, colouring and recognising commands."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from swarmbot.codec import ByteReader

_COLOR_CODES = {
    "dark_blue": 34,
    "blue": 34,
    "dark_aqua": 36,
    "aqua": 36,
    "red": 31,
    "dark_red": 31,
    "purple": 35,
    "light_purple": 35,
    "gold": 33,
    "yellow": 33,
    "gray": 37,
    "dark_gray": 30,
    "green": 32,
    "dark_green": 32,
    "white": 37,
}
_DEFAULT_COLOR_CODE = 30
_RESET = "\x1b[0m"

_DM_RE = re.compile(r"^([A-Za-z_0-9]+) whispers: (.*)")
_MESSAGE_RE = re.compile(r"^<([A-Za-z_0-9]+)> (.*)")
_COMMAND_RE = re.compile(r"^#(\S+)\s?(.*)")


@dataclass
class ChatSection:
    """A run of chat text sharing one style."""

    text: str
    color: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    underlined: bool | None = None
    strikethrough: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatSection:
        if "text" not in data:
            raise ValueError("chat section has no text")
        return cls(
            text=data["text"],
            color=data.get("color"),
            bold=data.get("bold"),
            italic=data.get("italic"),
            underlined=data.get("underlined"),
            strikethrough=data.get("strikethrough"),
        )

    def colorize(self) -> str:
        """Render the text with ANSI terminal styling."""
        codes = []
        if self.bold:
            codes.append("1")
        if self.italic:
            codes.append("3")
        if self.underlined:
            codes.append("4")
        if self.strikethrough:
            codes.append("9")
        codes.append(str(_COLOR_CODES.get(self.color or "", _DEFAULT_COLOR_CODE)))
        return f"\x1b[{';'.join(codes)}m{self.text}{_RESET}"


@dataclass
class ChatCommand:
    """A ``#command arg ...`` request made by a player."""

    player: str
    command: str
    args: list[str] = field(default_factory=list)


@dataclass
class PlayerMessage:
    """A message sent by a named player."""

    player: str
    message: str

    def into_cmd(self) -> ChatCommand | None:
        """Interpret the message as a command, or None if it is not one."""
        match = _COMMAND_RE.match(self.message)
        if match is None:
            return None
        command, rest = match.group(1), match.group(2)
        args = rest.split(" ") if rest else []
        return ChatCommand(self.player, command, args)


@dataclass
class Chat:
    """A chat message made of styled sections."""

    extra: list[ChatSection] | None = None
    text: str | None = None

    @classmethod
    def from_json(cls, text: str) -> Chat:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("chat message must be a JSON object")
        extra = data.get("extra")
        return cls(
            extra=None if extra is None else [ChatSection.from_dict(item) for item in extra],
            text=data.get("text"),
        )

    @classmethod
    def read(cls, reader: ByteReader) -> Chat:
        return cls.from_json(reader.read_string())

    def colorize(self) -> str:
        if self.extra is None:
            return ""
        return "".join(section.colorize() for section in self.extra)

    def _plain(self) -> str | None:
        if self.extra is None:
            return None
        return "".join(section.text for section in self.extra)

    def _match(self, pattern: re.Pattern[str]) -> PlayerMessage | None:
        text = self._plain()
        if text is None:
            return None
        match = pattern.match(text)
        if match is None:
            return None
        return PlayerMessage(match.group(1), match.group(2))

    def player_dm(self) -> PlayerMessage | None:
        """The whisper this chat carries, if it is one."""
        return self._match(_DM_RE)

    def player_message(self) -> PlayerMessage | None:
        """The public player message this chat carries, if it is one."""
        return self._match(_MESSAGE_RE)