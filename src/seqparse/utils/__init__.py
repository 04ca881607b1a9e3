from .general import *  # NOQA
from . import config  # NOQA
