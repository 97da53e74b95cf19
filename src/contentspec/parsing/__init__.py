from .lines import LineBuffer
from .variables import VariableSet, find_variable_set, find_variable_sets, get_line_variables

__all__ = ["LineBuffer", "VariableSet", "find_variable_set", "find_variable_sets", "get_line_variables"]
