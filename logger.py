from enum import Enum
import logging
import os


class AnsiColors(Enum):
    RESET = 0
    BOLD = 1
    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37

    CSI = "\x1b["

    @classmethod
    def sgr(cls, *codes):
        return (
            AnsiColors.CSI.value
            + ";".join([str(AnsiColors[c].value) for c in codes])
            + "m"
        )


class ColorizingStreamHandler(logging.StreamHandler):
    """Console handler used by logging.yaml. Colours are only applied
    when writing to a terminal, or when COLORIZE_LOGS=always."""

    DEFAULT_COLORS = {
        "DEBUG": "BLUE",
        "WARNING": "YELLOW",
        "ERROR": "RED",
        "CRITICAL": ["RED", "BOLD"],
    }

    def __init__(self, stream=None, colors=None):
        super().__init__(stream)

        if colors is None:
            colors = {}
        colors = dict(**self.DEFAULT_COLORS, **colors)
        self.colors = {}
        for level, names in colors.items():
            if not isinstance(names, (list, tuple)):
                names = [names]
            self.colors[level] = AnsiColors.sgr(*names)

        self.should_colorize = self.is_tty or os.getenv("COLORIZE_LOGS") == "always"

    @property
    def is_tty(self):
        isatty = getattr(self.stream, "isatty", None)
        return isatty and isatty()

    def colorize(self, message, record):
        color = self.colors.get(record.levelname)
        if color:
            lines = message.splitlines()
            message = "\n".join(color + line + AnsiColors.sgr("RESET") for line in lines)
        return message

    def format(self, record):
        message = logging.StreamHandler.format(self, record)
        if self.should_colorize:
            message = self.colorize(message, record)
        return message
