"""Readers of detector banks."""

from .base import EventRows
from .memory import *
from .root import *
