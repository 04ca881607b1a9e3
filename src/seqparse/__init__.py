"""
Find and describe sequences of numbered files

    shot_0001.png ... shot_0200.png  ->  shot_####.png 1-200
"""
__version__ = '0.2.0'

from . import utils  # NOQA
from .exceptions import *  # NOQA
from .pattern import (  # NOQA
    FRAME_NUMBER,
    SHORT_VIEW,
    LONG_VIEW,
    NO_VIEW,
    Literal,
    Variable,
    Pattern,
    PatternMatch,
    tokenize,
    check_variable,
    match_pattern,
    generate_filename,
)
from .filename import (  # NOQA
    FileNameElement,
    FileNameContent,
    decompose,
    match_files,
)
from .core import *  # NOQA
