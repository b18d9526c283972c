"""
Controllers connecting pointer input and view state to the overlay core.
"""
from .interaction import HoverState, InteractionStateMachine, PointerContext
from .view_controller import ViewController

__all__ = [
    'InteractionStateMachine',
    'HoverState',
    'PointerContext',
    'ViewController'
]
