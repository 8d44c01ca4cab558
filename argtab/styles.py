"""
Argtab color policy and palette.

Scope
- ColorMode: never/auto/always policy chosen by the caller.
- colorize(): resolve a policy against an output stream.
- palette(): role -> rich style mapping, overridable by the host application.
- render(): turn a rich Text into a plain or ANSI-styled string.

Coloring is always caller policy. Help text and error messages are assembled
as styled rich Text and only flattened at the edge, so the same fragments serve
both plain and colored output.

Host customization
- A __styles__ mapping in __main__ overrides individual roles, e.g.:
    __styles__ = {"error": "bold red", "hint": "green"}
"""
import io
import sys
from collections import defaultdict
from enum import StrEnum

from rich.console import Console
from rich.text import Text


class ColorMode(StrEnum):
    """
    when to emit ANSI styling.

    - NEVER: plain text.
    - AUTO: styled only when the target stream is a color-capable terminal.
    - ALWAYS: styled regardless of the target stream.
    """
    NEVER = "never"
    AUTO = "auto"
    ALWAYS = "always"


STYLES = {
    # help
    "usage": "bold #E6E6F0",  # "Usage:" label
    "program": "bold #E6E6F0",  # program path in usage
    "header": "bold #00E5FF",  # section headers (Arguments:, Flags:, ...)
    "argument": "#9CE19C",  # argument spellings (-v, --verbose, <input>)
    "placeholder": "italic #C8C8D0",  # value placeholders (<int>)
    "command": "bold #9CE19C",  # subcommand names
    "required": "#FFB400",  # (required) marker
    "default": "dim",  # [default: x] marker

    # errors
    "error": "bold #FF4DA6",  # "error:" label
    "code": "bold #FFB400",  # normalized kind in the heading
    "message": "#C8C8D0",  # message body
    "token": "bold #E6E6F0",  # quoted user input and argument forms
    "hint-arrow": "#9CE19C dim",  # suggestion arrow
    "hint": "italic #9CE19C",  # suggestion text
}


def palette():
    """
    current role -> style mapping.

    Unknown roles resolve to the empty style. The host application can
    provide a __styles__ mapping in __main__ to override any role.
    """
    return defaultdict(str, STYLES | getattr(__import__("__main__"), "__styles__", {}))


def colorize(mode, stream=None, /):
    """
    resolve a ColorMode into a boolean for the given stream (stdout by default).

    AUTO defers to rich's terminal detection, so NO_COLOR, FORCE_COLOR and
    TERM=dumb behave the way they do for any rich application.
    """
    match ColorMode(mode):
        case ColorMode.NEVER:
            return False
        case ColorMode.ALWAYS:
            return True
        case ColorMode.AUTO:
            console = Console(file=stream if stream is not None else sys.stdout)
            return console.color_system is not None and not console.no_color


def render(text, color, /):
    """
    flatten a rich Text into a string, keeping its styles only when color is set.
    """
    if not isinstance(text, Text):
        raise TypeError("render() first argument must be a rich text")
    if not color:
        return text.plain

    console = Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="truecolor",
        no_color=False,
        soft_wrap=True,
        highlight=False,
        markup=False,
        emoji=False,
        legacy_windows=False,
    )
    console.print(text, end="")
    return console.file.getvalue()


__all__ = (
    "ColorMode",
    "STYLES",
    "palette",
    "colorize",
    "render",
)
