"""
Code Generation Module
======================

Lua script rendering for the Roblox target runtime.

This module provides:
    - GridLayout / build_layout: fixed vs viewport-relative placement
    - LuaScriptGenerator / generate_script: static and animated scripts
    - EmptySequenceError: raised for zero-frame input
"""

from pixelgui.codegen.layout import GridLayout, LayoutMode, build_layout
from pixelgui.codegen.lua import (
    EmptySequenceError,
    LuaScriptGenerator,
    generate_script,
    quote_lua_string,
)

__all__ = [
    "GridLayout",
    "LayoutMode",
    "build_layout",
    "EmptySequenceError",
    "LuaScriptGenerator",
    "generate_script",
    "quote_lua_string",
]
