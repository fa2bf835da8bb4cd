"""Bindery client binding generator."""

from .parser import ValidationError as ValidationError
from .parser import load as load
from .parser import parse_type as parse_type
from .python import render as render
from .registry import Family as Family
from .registry import build_registry as build_registry
from .types import *
