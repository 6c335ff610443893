from .shift import *  # noqa: F403
from .recurring import *  # noqa: F403
