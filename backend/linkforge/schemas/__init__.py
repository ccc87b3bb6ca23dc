"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .auth import *
from .account import *
from .links import *
from .admin import *
from .public import *
